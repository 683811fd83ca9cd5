"""Evolution strategy contracts shared by the generational loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from core.random_source import RandomStream
from genome.codec import GenomeReader

if TYPE_CHECKING:
    from evolution.population import Lifeform


# Raw, domain-defined score of one genome. Must not mutate the reader's genome.
EvaluationFunc = Callable[[GenomeReader], float]

# Maps (evaluation, min, max) of one generation to a fitness; higher reproduces more.
FitnessTransform = Callable[[float, float, float], float]

# Picks a parent index given the precomputed total fitness of the generation.
ParentSelector = Callable[[RandomStream, float, Sequence["Lifeform"]], int]

# Builds a fresh child buffer from (mother, father) genomes.
Recombination = Callable[[RandomStream, bytes, bytes], bytearray]

# Perturbs a child buffer, possibly in place, and returns it.
Mutation = Callable[[RandomStream, bytearray], bytearray]


class ConfigurationError(ValueError):
    """Raised when population or genome sizing is unusable."""


class EvaluationError(RuntimeError):
    """Raised when the evaluation function fails for one individual.

    The run is aborted: retrying with another genome would bias the
    population the evaluator rejected.
    """

    def __init__(self, message: str, generation: int, index: int) -> None:
        super().__init__(message)
        self.generation = generation
        self.index = index


class PopulationStagnatedError(RuntimeError):
    """Raised when distinct parents or a novel child cannot be drawn."""

    def __init__(self, message: str, generation: int, index: int) -> None:
        super().__init__(message)
        self.generation = generation
        self.index = index


@dataclass(frozen=True)
class RetryLimits:
    """Caps for the rejection-sampling loops of one child slot."""

    max_parent_retries: int = 10_000
    max_child_retries: int = 10_000

    def __post_init__(self) -> None:
        if self.max_parent_retries < 1 or self.max_child_retries < 1:
            raise ConfigurationError("Retry limits must be >= 1.")


@dataclass(frozen=True)
class EvolutionOperators:
    """Selection, recombination and mutation used for one transition."""

    select: ParentSelector
    recombine: Recombination
    mutate: Mutation

    @classmethod
    def default(cls) -> "EvolutionOperators":
        from evolution.mutation import single_bit_mutation
        from evolution.recombination import bit_pivot_crossover
        from evolution.selection import roulette_select

        return cls(select=roulette_select, recombine=bit_pivot_crossover, mutate=single_bit_mutation)
