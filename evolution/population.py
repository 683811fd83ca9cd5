"""Population data model and the generational transition."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from core.random_source import RandomStream
from evolution.base import (
    ConfigurationError,
    EvaluationError,
    EvaluationFunc,
    EvolutionOperators,
    FitnessTransform,
    PopulationStagnatedError,
    RetryLimits,
)
from evolution.fitness import normalize
from genome.codec import GenomeReader


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lifeform:
    """A genome scored by the evaluation function.

    ``fitness`` is derived from ``evaluation`` and the bounds of the
    generation the lifeform belongs to. ``parents`` holds the mother and
    father indices in the previous generation, ``None`` for the initial one.
    """

    genes: bytes
    evaluation: float
    fitness: float = 0.0
    parents: tuple[int, int] | None = None


def _evaluate(evaluate: EvaluationFunc, genes: bytes, generation: int, index: int) -> float:
    try:
        return float(evaluate(GenomeReader(genes)))
    except Exception as exc:
        raise EvaluationError(
            f"Evaluation failed for generation {generation}, individual {index}: {exc}",
            generation=generation,
            index=index,
        ) from exc


@dataclass(frozen=True)
class Population:
    """One immutable generation of competing lifeforms.

    Index order is stable within a generation, which keeps selection
    reproducible when the same random sequence is replayed.
    """

    lifeforms: tuple[Lifeform, ...]
    generation: int = 0

    def __post_init__(self) -> None:
        if not self.lifeforms:
            raise ConfigurationError("A population needs at least one lifeform.")
        lengths = {len(lifeform.genes) for lifeform in self.lifeforms}
        if len(lengths) != 1:
            raise ConfigurationError(f"All genomes in a population must share one length, got {sorted(lengths)}.")

    @classmethod
    def create(
        cls,
        rng: RandomStream,
        genome_length: int,
        population_size: int,
        evaluate: EvaluationFunc,
        transform: FitnessTransform,
    ) -> "Population":
        """Create an initial population of random genomes to start the evolution."""
        if genome_length < 1:
            raise ConfigurationError("genome_length must be >= 1")
        if population_size < 2:
            raise ConfigurationError("population_size must be >= 2 so distinct parents exist")

        scored: list[Lifeform] = []
        for index in range(population_size):
            genes = rng.fill(genome_length)
            evaluation = _evaluate(evaluate, genes, 0, index)
            LOGGER.debug("lifeform %d eva=%f", index, evaluation)
            scored.append(Lifeform(genes=genes, evaluation=evaluation))

        return cls(lifeforms=normalize(scored, transform), generation=0)

    def __len__(self) -> int:
        return len(self.lifeforms)

    def __iter__(self) -> Iterator[Lifeform]:
        return iter(self.lifeforms)

    def __getitem__(self, index: int) -> Lifeform:
        return self.lifeforms[index]

    @property
    def genome_length(self) -> int:
        return len(self.lifeforms[0].genes)

    def total_fitness(self) -> float:
        total = 0.0
        for lifeform in self.lifeforms:
            total += lifeform.fitness
        return total

    def fittest(self) -> Lifeform:
        """Return the lifeform with the highest fitness; the first one wins ties."""
        champion = self.lifeforms[0]
        for competitor in self.lifeforms:
            if competitor.fitness > champion.fitness:
                champion = competitor
        return champion

    def evolve(
        self,
        rng: RandomStream,
        evaluate: EvaluationFunc,
        transform: FitnessTransform,
        operators: EvolutionOperators | None = None,
        limits: RetryLimits | None = None,
    ) -> "Population":
        """Generate the next generation of lifeforms.

        Every child has two distinct parents and differs byte-for-byte from
        both of them. Fitness of the new generation is assigned once all
        children are evaluated.
        """
        if len(self.lifeforms) < 2:
            raise ConfigurationError("Evolving requires at least two lifeforms.")
        ops = operators or EvolutionOperators.default()
        caps = limits or RetryLimits()
        generation = self.generation + 1
        total = self.total_fitness()

        children: list[Lifeform] = []
        for index in range(len(self.lifeforms)):
            mother_idx, father_idx = self._select_parents(rng, total, ops, caps, generation, index)
            mother = self.lifeforms[mother_idx]
            father = self.lifeforms[father_idx]

            genes = self._breed(rng, mother.genes, father.genes, ops, caps, generation, index)
            evaluation = _evaluate(evaluate, genes, generation, index)
            LOGGER.debug(
                "lifeform %d eva=%f parents=(%d, %d)", index, evaluation, mother_idx, father_idx
            )
            children.append(Lifeform(genes=genes, evaluation=evaluation, parents=(mother_idx, father_idx)))

        return Population(lifeforms=normalize(children, transform), generation=generation)

    def _select_parents(
        self,
        rng: RandomStream,
        total: float,
        ops: EvolutionOperators,
        caps: RetryLimits,
        generation: int,
        index: int,
    ) -> tuple[int, int]:
        mother_idx = ops.select(rng, total, self.lifeforms)
        for _ in range(caps.max_parent_retries):
            father_idx = ops.select(rng, total, self.lifeforms)
            if father_idx != mother_idx:
                return mother_idx, father_idx
        raise PopulationStagnatedError(
            f"No distinct father found for mother {mother_idx} after {caps.max_parent_retries} draws "
            f"(generation {generation}, individual {index}).",
            generation=generation,
            index=index,
        )

    @staticmethod
    def _breed(
        rng: RandomStream,
        mother: bytes,
        father: bytes,
        ops: EvolutionOperators,
        caps: RetryLimits,
        generation: int,
        index: int,
    ) -> bytes:
        for _ in range(caps.max_child_retries):
            child = ops.mutate(rng, ops.recombine(rng, mother, father))
            if child != mother and child != father:
                return bytes(child)
        raise PopulationStagnatedError(
            f"No child differing from both parents after {caps.max_child_retries} attempts "
            f"(generation {generation}, individual {index}); the population collapsed to a single genome.",
            generation=generation,
            index=index,
        )
