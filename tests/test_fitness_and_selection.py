"""Tests for fitness normalization and roulette selection."""

from __future__ import annotations

import math

import pytest

from evolution.fitness import (
    evaluation_bounds,
    inverted_range,
    normalize,
    normalized_inverse,
    shifted_range,
)
from evolution.population import Lifeform
from evolution.selection import roulette_select


def _lifeforms(*evaluations: float) -> list[Lifeform]:
    return [Lifeform(genes=bytes([i]), evaluation=value) for i, value in enumerate(evaluations)]


def test_evaluation_bounds_single_pass() -> None:
    assert evaluation_bounds([3.0, -1.0, 7.5, 2.0]) == (-1.0, 7.5)

    with pytest.raises(ValueError, match="empty"):
        evaluation_bounds([])


def test_normalize_uses_generation_bounds_and_keeps_order() -> None:
    scored = normalize(_lifeforms(10.0, 4.0, 6.0), inverted_range)

    assert [lifeform.fitness for lifeform in scored] == [0.0, 6.0, 4.0]
    assert [lifeform.genes for lifeform in scored] == [bytes([0]), bytes([1]), bytes([2])]


def test_identical_evaluations_collapse_to_constant_fitness() -> None:
    assert {lf.fitness for lf in normalize(_lifeforms(5.0, 5.0, 5.0), inverted_range)} == {0.0}
    assert {lf.fitness for lf in normalize(_lifeforms(5.0, 5.0), normalized_inverse)} == {1.0}


def test_stock_transforms() -> None:
    assert normalized_inverse(2.0, 2.0, 6.0) == 1.0
    assert normalized_inverse(6.0, 2.0, 6.0) == 0.0
    assert shifted_range(6.0, 2.0, 6.0) == 4.0


def test_non_finite_fitness_is_rejected() -> None:
    with pytest.raises(ValueError, match="Fitness transform returned"):
        normalize(_lifeforms(1.0, 2.0), lambda value, lowest, highest: math.inf)


def test_roulette_select_walks_cumulative_fitness(scripted_rng) -> None:
    population = [Lifeform(genes=b"a", evaluation=0.0, fitness=f) for f in (1.0, 2.0, 3.0)]
    total = 6.0

    assert roulette_select(scripted_rng(floats=[0.0]), total, population) == 0
    assert roulette_select(scripted_rng(floats=[0.2]), total, population) == 1
    assert roulette_select(scripted_rng(floats=[0.9]), total, population) == 2


def test_roulette_select_falls_back_to_last_index() -> None:
    population = [Lifeform(genes=b"a", evaluation=0.0, fitness=1.0) for _ in range(3)]

    class AlmostOne:
        def uniform(self) -> float:
            return 0.9999999999

    # Overstated total leaves the offset non-negative after the scan.
    assert roulette_select(AlmostOne(), 4.0, population) == 2


def test_roulette_select_with_zero_total_returns_valid_index(scripted_rng) -> None:
    population = [Lifeform(genes=b"a", evaluation=1.0, fitness=0.0) for _ in range(4)]

    index = roulette_select(scripted_rng(ints=[1]), 0.0, population)

    assert index == 1
    assert all(lifeform.fitness == 0.0 for lifeform in population)


def test_roulette_select_rejects_empty_population(scripted_rng) -> None:
    with pytest.raises(ValueError):
        roulette_select(scripted_rng(floats=[0.5]), 1.0, [])
