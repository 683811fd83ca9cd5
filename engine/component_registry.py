"""Factories/registries for the strategies an experiment config can name."""

from __future__ import annotations

import functools
from typing import Callable

from configs.loader import ExperimentConfig
from evolution.base import (
    ConfigurationError,
    EvolutionOperators,
    FitnessTransform,
    Mutation,
    ParentSelector,
    Recombination,
    RetryLimits,
)
from evolution.fitness import inverted_range, normalized_inverse, shifted_range
from evolution.mutation import single_bit_mutation, sparse_mutation
from evolution.recombination import FeatureCrossover, bit_pivot_crossover
from evolution.selection import roulette_select
from genome.layout import FeatureLayout
from simulations.triangles import triangle_layout


SelectionFactory = Callable[[ExperimentConfig], ParentSelector]
RecombinationFactory = Callable[[ExperimentConfig], Recombination]
MutationFactory = Callable[[ExperimentConfig], Mutation]
FitnessFactory = Callable[[ExperimentConfig], FitnessTransform]
LayoutFactory = Callable[[ExperimentConfig], FeatureLayout]


_SELECTION_FACTORIES: dict[str, SelectionFactory] = {}
_RECOMBINATION_FACTORIES: dict[str, RecombinationFactory] = {}
_MUTATION_FACTORIES: dict[str, MutationFactory] = {}
_FITNESS_FACTORIES: dict[str, FitnessFactory] = {}
_LAYOUT_FACTORIES: dict[str, LayoutFactory] = {}


def register_selection_factory(name: str, factory: SelectionFactory) -> None:
    _SELECTION_FACTORIES[str(name)] = factory


def register_recombination_factory(name: str, factory: RecombinationFactory) -> None:
    _RECOMBINATION_FACTORIES[str(name)] = factory


def register_mutation_factory(name: str, factory: MutationFactory) -> None:
    _MUTATION_FACTORIES[str(name)] = factory


def register_fitness_factory(name: str, factory: FitnessFactory) -> None:
    _FITNESS_FACTORIES[str(name)] = factory


def register_layout_factory(name: str, factory: LayoutFactory) -> None:
    _LAYOUT_FACTORIES[str(name)] = factory


def available_selection_factories() -> list[str]:
    return sorted(_SELECTION_FACTORIES)


def available_recombination_factories() -> list[str]:
    return sorted(_RECOMBINATION_FACTORIES)


def available_mutation_factories() -> list[str]:
    return sorted(_MUTATION_FACTORIES)


def available_fitness_factories() -> list[str]:
    return sorted(_FITNESS_FACTORIES)


def available_layout_factories() -> list[str]:
    return sorted(_LAYOUT_FACTORIES)


def _lookup(kind: str, registry: dict[str, Callable], name: str) -> Callable:
    factory = registry.get(str(name))
    if factory is None:
        available = ", ".join(sorted(registry)) or "<none>"
        raise ConfigurationError(f"Unknown {kind} factory '{name}'. Available: {available}")
    return factory


def create_selection(name: str, config: ExperimentConfig) -> ParentSelector:
    return _lookup("selection", _SELECTION_FACTORIES, name)(config)


def create_recombination(name: str, config: ExperimentConfig) -> Recombination:
    return _lookup("recombination", _RECOMBINATION_FACTORIES, name)(config)


def create_mutation(name: str, config: ExperimentConfig) -> Mutation:
    return _lookup("mutation", _MUTATION_FACTORIES, name)(config)


def create_fitness(name: str, config: ExperimentConfig) -> FitnessTransform:
    return _lookup("fitness", _FITNESS_FACTORIES, name)(config)


def create_layout(name: str, config: ExperimentConfig) -> FeatureLayout:
    return _lookup("layout", _LAYOUT_FACTORIES, name)(config)


def create_operators(config: ExperimentConfig) -> EvolutionOperators:
    """Build selection/recombination/mutation from config names."""
    return EvolutionOperators(
        select=create_selection(str(config.get("selection", "roulette")), config),
        recombine=create_recombination(str(config.get("recombination", "bit_pivot")), config),
        mutate=create_mutation(str(config.get("mutation", "single_bit")), config),
    )


def create_limits(config: ExperimentConfig) -> RetryLimits:
    defaults = RetryLimits()
    return RetryLimits(
        max_parent_retries=int(config.get("max_parent_retries", defaults.max_parent_retries)),
        max_child_retries=int(config.get("max_child_retries", defaults.max_child_retries)),
    )


def _roulette_factory(_config: ExperimentConfig) -> ParentSelector:
    return roulette_select


def _bit_pivot_factory(_config: ExperimentConfig) -> Recombination:
    return bit_pivot_crossover


def _feature_factory(config: ExperimentConfig) -> Recombination:
    layout = create_layout(str(config.get("feature_layout", "bytes")), config)
    if layout.genome_length() != config.genome_length:
        raise ConfigurationError(
            f"Feature layout '{config.get('feature_layout', 'bytes')}' covers {layout.genome_length()} byte(s) "
            f"but genome_length is {config.genome_length}."
        )
    return FeatureCrossover(layout)


def _max_flips(config: ExperimentConfig) -> int | None:
    value = config.get("max_mutation_flips", None)
    return None if value is None else int(value)


def _single_bit_factory(config: ExperimentConfig) -> Mutation:
    return functools.partial(single_bit_mutation, max_flips=_max_flips(config))


def _sparse_factory(config: ExperimentConfig) -> Mutation:
    return functools.partial(sparse_mutation, max_steps=_max_flips(config))


def _bytes_layout_factory(config: ExperimentConfig) -> FeatureLayout:
    return FeatureLayout.repeated(("uint8",), config.genome_length)


def _triangles_layout_factory(config: ExperimentConfig) -> FeatureLayout:
    return triangle_layout(
        int(config.get("feature_groups", 1)),
        background=bool(config.get("background", False)),
    )


def _register_defaults() -> None:
    if _SELECTION_FACTORIES:
        return
    register_selection_factory("roulette", _roulette_factory)

    register_recombination_factory("bit_pivot", _bit_pivot_factory)
    register_recombination_factory("feature", _feature_factory)

    register_mutation_factory("single_bit", _single_bit_factory)
    register_mutation_factory("sparse", _sparse_factory)

    register_fitness_factory("inverted_range", lambda _config: inverted_range)
    register_fitness_factory("normalized_inverse", lambda _config: normalized_inverse)
    register_fitness_factory("shifted_range", lambda _config: shifted_range)

    register_layout_factory("bytes", _bytes_layout_factory)
    register_layout_factory("triangles", _triangles_layout_factory)


_register_defaults()
