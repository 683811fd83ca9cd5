"""Simple evolution runner for local validation."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, ExperimentConfig
from core.random_source import RandomSource
from data.logger import EvolutionLogger
from engine.component_registry import create_fitness, create_limits, create_operators
from engine.runner import EvolutionRunner
from evolution.base import ConfigurationError
from evolution.population import Population
from simulations.target_match import make_target_evaluation


def _resolve_target(config: ExperimentConfig) -> bytes:
    """Target bytes from ``target`` (text) or derived from the seed."""
    raw = config.get("target", None)
    if raw is None:
        return RandomSource(config.seed + 1).fill(config.genome_length)
    target = str(raw).encode("utf-8")
    if len(target) != config.genome_length:
        raise ConfigurationError(
            f"target is {len(target)} byte(s) long but genome_length is {config.genome_length}."
        )
    return target


def build_components(config: ExperimentConfig, logger: EvolutionLogger | None = None) -> EvolutionRunner:
    """Build an evolution runner from experiment configuration."""
    return EvolutionRunner(
        evaluate=make_target_evaluation(_resolve_target(config)),
        transform=create_fitness(str(config.get("fitness", "inverted_range")), config),
        genome_length=config.genome_length,
        population_size=config.population_size,
        seed=config.seed,
        operators=create_operators(config),
        limits=create_limits(config),
        logger=logger,
        config=config.to_dict(),
    )


def run_experiment(config: ExperimentConfig, logger: EvolutionLogger | None = None) -> EvolutionRunner:
    """Run one configured experiment, stopping early once ``early_stop_evaluation`` is reached."""
    runner = build_components(config=config, logger=logger)

    early_stop_evaluation = config.get("early_stop_evaluation", None)
    if early_stop_evaluation is None:
        runner.run(config.generations)
        return runner

    threshold = float(early_stop_evaluation)

    def _stop_when_reached(population: Population) -> None:
        if population.fittest().evaluation <= threshold:
            runner.stop()

    runner.run(config.generations, on_generation=_stop_when_reached)
    return runner


def main(config_path: str = "configs/example_experiment.yaml", db_path: str = "evolution_metrics.db") -> None:
    """Load config, build components, and run the evolution."""
    logging.basicConfig(level=logging.INFO)
    configs = ConfigLoader.load_many(config_path)
    logger = EvolutionLogger(Path(db_path))
    try:
        for config in configs:
            run_experiment(config, logger)
    finally:
        logger.close()


if __name__ == "__main__":
    main()
