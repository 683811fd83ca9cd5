"""Fitness normalization relative to one generation's evaluation bounds."""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING, Iterable, Sequence

from evolution.base import FitnessTransform

if TYPE_CHECKING:
    from evolution.population import Lifeform


def evaluation_bounds(values: Iterable[float]) -> tuple[float, float]:
    """Return ``(min, max)`` of evaluations in a single pass."""
    lowest = math.inf
    highest = -math.inf
    seen = False
    for value in values:
        seen = True
        if value < lowest:
            lowest = value
        if value > highest:
            highest = value
    if not seen:
        raise ValueError("Cannot compute evaluation bounds of an empty generation.")
    return lowest, highest


def normalize(lifeforms: Sequence["Lifeform"], transform: FitnessTransform) -> tuple["Lifeform", ...]:
    """Return copies of ``lifeforms`` with fitness derived from their own generation.

    Fitness is never compared across generations; it is always
    ``transform(evaluation, min, max)`` for the bounds of ``lifeforms``.
    """
    lowest, highest = evaluation_bounds(lifeform.evaluation for lifeform in lifeforms)
    normalized = []
    for lifeform in lifeforms:
        fitness = float(transform(lifeform.evaluation, lowest, highest))
        if not math.isfinite(fitness):
            raise ValueError(
                f"Fitness transform returned {fitness} for evaluation {lifeform.evaluation} "
                f"(bounds {lowest}, {highest})."
            )
        normalized.append(dataclasses.replace(lifeform, fitness=fitness))
    return tuple(normalized)


def inverted_range(value: float, lowest: float, highest: float) -> float:
    """Lower evaluation is better: ``max - evaluation``."""
    return highest - value


def normalized_inverse(value: float, lowest: float, highest: float) -> float:
    """Lower evaluation is better, scaled into ``[0, 1]``.

    A collapsed generation (``min == max``) gets 1.0 everywhere.
    """
    spread = highest - lowest
    if spread <= 0.0:
        return 1.0
    return (highest - value) / spread


def shifted_range(value: float, lowest: float, highest: float) -> float:
    """Higher evaluation is better: ``evaluation - min``."""
    return value - lowest
