"""Generation statistics decoupled from the evolutionary loop."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from evolution.population import Population


def genome_diversity(genomes: Sequence[bytes]) -> float:
    """Mean pairwise Hamming distance in bits across ``genomes``."""
    if len(genomes) < 2:
        return 0.0

    bits = np.unpackbits(np.frombuffer(b"".join(genomes), dtype=np.uint8).reshape(len(genomes), -1), axis=1)
    total = 0
    pairs = 0
    for i in range(len(genomes) - 1):
        distances = np.count_nonzero(bits[i + 1 :] != bits[i], axis=1)
        total += int(distances.sum())
        pairs += int(distances.size)
    return float(total) / float(pairs)


def summarize_generation(population: Population) -> dict[str, float]:
    """Build per-generation metrics for the logging layer."""
    evaluations = np.fromiter((lifeform.evaluation for lifeform in population), dtype=np.float64)
    champion = population.fittest()
    return {
        "generation_index": float(population.generation),
        "best_evaluation": float(champion.evaluation),
        "best_fitness": float(champion.fitness),
        "mean_evaluation": float(evaluations.mean()),
        "min_evaluation": float(evaluations.min()),
        "max_evaluation": float(evaluations.max()),
        "total_fitness": float(population.total_fitness()),
        "diversity": genome_diversity([lifeform.genes for lifeform in population]),
    }
