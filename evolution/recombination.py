"""Recombination strategies producing a child genome from two parents."""

from __future__ import annotations

from core.random_source import RandomStream
from evolution.base import ConfigurationError
from genome.codec import GenomeReader, GenomeWriter
from genome.layout import FeatureLayout


def _check_parents(mother: bytes, father: bytes) -> int:
    if len(mother) != len(father):
        raise ValueError(f"Parent genomes differ in length ({len(mother)} != {len(father)}).")
    if not mother:
        raise ValueError("Parent genomes must not be empty.")
    return len(mother)


def bit_pivot_crossover(rng: RandomStream, mother: bytes, father: bytes) -> bytearray:
    """Single-point crossover with bit granularity at the pivot byte.

    Bytes before the pivot come from the mother, bytes after it from the
    father. The pivot byte keeps the mother's high bits and the father's low
    bits; the pivot bit is drawn modulo 9 so the pivot byte can be taken
    entirely from either parent.
    """
    size = _check_parents(mother, father)

    pivot_byte = rng.int_below(size)
    pivot_bit = rng.int_below(9)

    child = bytearray(father)
    child[:pivot_byte] = mother[:pivot_byte]

    mask = (0xFF << pivot_bit) & 0xFF
    child[pivot_byte] = (mother[pivot_byte] & mask) | (father[pivot_byte] & ~mask & 0xFF)
    return child


class FeatureCrossover:
    """Inherit whole feature groups from one parent or the other.

    Each group of ``layout`` is taken verbatim from the mother or the father
    on a coin flip, so a logically related set of fields is never split.
    """

    def __init__(self, layout: FeatureLayout) -> None:
        self.layout = layout

    def __call__(self, rng: RandomStream, mother: bytes, father: bytes) -> bytearray:
        size = _check_parents(mother, father)
        if size != self.layout.genome_length():
            raise ConfigurationError(
                f"Feature layout covers {self.layout.genome_length()} byte(s) but genomes have {size}."
            )

        child = bytearray(size)
        writer = GenomeWriter(child)
        mother_reader = GenomeReader(mother)
        father_reader = GenomeReader(father)

        for index in range(len(self.layout.groups)):
            selected = father_reader if rng.int_below(2) == 0 else mother_reader
            self.layout.copy_group(index, selected, writer)
        return child
