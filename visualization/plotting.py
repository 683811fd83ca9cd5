"""Plot utilities for persisted evolution metrics."""

from __future__ import annotations

from pathlib import Path

from matplotlib.figure import Figure

from data.logger import EvolutionLogger


def plot_experiment(db_path: str | Path, experiment_id: str, output_path: str | Path) -> Path:
    """Render evaluation/diversity curves for an experiment from SQLite logs."""
    logger = EvolutionLogger(db_path)
    try:
        rows = logger.fetch_metrics(experiment_id)
    finally:
        logger.close()
    if not rows:
        raise ValueError(f"No generation metrics logged for experiment '{experiment_id}'.")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    generations = [int(row["generation_index"]) for row in rows]
    best_evaluation = [float(row["best_evaluation"]) for row in rows]
    mean_evaluation = [float(row["mean_evaluation"]) for row in rows]
    diversity = [float(row["diversity"]) for row in rows]

    fig = Figure(figsize=(8, 6))
    ax1, ax2 = fig.subplots(2, 1, sharex=True)
    ax1.plot(generations, best_evaluation, label="best_evaluation")
    ax1.plot(generations, mean_evaluation, label="mean_evaluation")
    ax1.set_ylabel("evaluation")
    ax1.legend()

    ax2.plot(generations, diversity, label="diversity", color="tab:green")
    ax2.set_ylabel("diversity (bits)")
    ax2.set_xlabel("generation")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    return output
