"""Parent selection strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from core.random_source import RandomStream

if TYPE_CHECKING:
    from evolution.population import Lifeform


def roulette_select(rng: RandomStream, total_fitness: float, population: Sequence["Lifeform"]) -> int:
    """Fitness-proportionate (roulette-wheel) selection.

    ``total_fitness`` is the generation's precomputed fitness sum; it is not
    recomputed here. Higher fitness increases the probability of selection,
    which creates the pressure required for evolution.

    When the total is not positive every individual is equally fit, so the
    choice degrades to a uniform draw instead of always landing on the last
    index.
    """
    if not population:
        raise ValueError("Cannot select from an empty population.")

    if total_fitness <= 0.0:
        return rng.int_below(len(population))

    offset = rng.uniform() * total_fitness
    for index, lifeform in enumerate(population):
        offset -= lifeform.fitness
        if offset < 0:
            return index

    # Floating point residue left the offset at or above zero.
    return len(population) - 1
