"""Tests for crossover and mutation operators."""

from __future__ import annotations

import pytest

from core.random_source import RandomSource
from evolution.base import ConfigurationError
from evolution.mutation import single_bit_mutation, sparse_mutation
from evolution.recombination import FeatureCrossover, bit_pivot_crossover
from genome.layout import FeatureLayout
from simulations.triangles import triangle_layout


MOTHER = bytes([0, 0, 0])
FATHER = bytes([255, 255, 255])


@pytest.mark.parametrize(
    ("pivot_byte", "pivot_bit", "expected"),
    [
        (2, 6, [0, 0, 63]),
        (0, 3, [7, 255, 255]),
        (1, 3, [0, 7, 255]),
        (1, 0, [0, 0, 255]),
        (1, 8, [0, 255, 255]),
    ],
)
def test_bit_pivot_crossover_bytes(scripted_rng, pivot_byte, pivot_bit, expected) -> None:
    child = bit_pivot_crossover(scripted_rng(ints=[pivot_byte, pivot_bit]), MOTHER, FATHER)

    assert child == bytearray(expected)


def test_bit_pivot_crossover_returns_independent_buffer() -> None:
    mother = bytes([1, 2, 3, 4])
    father = bytes([5, 6, 7, 8])

    child = bit_pivot_crossover(RandomSource(3), mother, father)
    child[0] ^= 0xFF

    assert len(child) == 4
    assert mother == bytes([1, 2, 3, 4])
    assert father == bytes([5, 6, 7, 8])


def test_bit_pivot_crossover_rejects_mismatched_parents(scripted_rng) -> None:
    with pytest.raises(ValueError, match="differ in length"):
        bit_pivot_crossover(scripted_rng(ints=[0, 0]), bytes(2), bytes(3))


def test_feature_crossover_inherits_whole_groups(scripted_rng) -> None:
    layout = FeatureLayout.repeated(("uint8", "uint16"), 3)
    mother = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9])
    father = bytes([11, 12, 13, 14, 15, 16, 17, 18, 19])

    # 0 picks the father, anything else the mother.
    child = FeatureCrossover(layout)(scripted_rng(ints=[1, 0, 1]), mother, father)

    assert child == bytearray([1, 2, 3, 14, 15, 16, 7, 8, 9])


def test_feature_crossover_with_triangle_layout(scripted_rng) -> None:
    layout = triangle_layout(2, background=True)
    mother = bytes(range(33))
    father = bytes(range(100, 133))

    child = FeatureCrossover(layout)(scripted_rng(ints=[0, 1, 0]), mother, father)

    assert child[:3] == father[:3]
    assert child[3:18] == mother[3:18]
    assert child[18:] == father[18:]


def test_feature_crossover_requires_matching_layout(scripted_rng) -> None:
    crossover = FeatureCrossover(FeatureLayout.repeated(("uint8",), 4))

    with pytest.raises(ConfigurationError, match="covers 4 byte"):
        crossover(scripted_rng(), bytes(3), bytes(3))


def test_single_bit_mutation_may_leave_genome_untouched(scripted_rng) -> None:
    genome = bytearray([0, 0])

    assert single_bit_mutation(scripted_rng(ints=[1]), genome) is genome
    assert genome == bytearray([0, 0])


def test_single_bit_mutation_chains_flips(scripted_rng) -> None:
    genome = bytearray([0, 0, 0])
    # flip byte 1 bit 0, flip byte 0 bit 7, then stop
    rng = scripted_rng(ints=[0, 1, 0, 0, 0, 7, 1])

    single_bit_mutation(rng, genome)

    assert genome == bytearray([128, 1, 0])
    assert not rng.ints


def test_single_bit_mutation_bit_eight_is_a_no_op(scripted_rng) -> None:
    genome = bytearray([5])

    single_bit_mutation(scripted_rng(ints=[0, 0, 8, 1]), genome)

    assert genome == bytearray([5])


def test_single_bit_mutation_caps_flip_count(scripted_rng) -> None:
    genome = bytearray([0, 0, 0])
    rng = scripted_rng(ints=[0, 0, 0, 0, 1, 1, 0, 0, 2, 99])

    single_bit_mutation(rng, genome, max_flips=2)

    assert genome == bytearray([1, 2, 0])
    assert list(rng.ints) == [0, 0, 2, 99]


def test_sparse_mutation_skips_some_rounds(scripted_rng) -> None:
    genome = bytearray([0])
    # continue + skip, continue + flip bit 4, stop
    rng = scripted_rng(ints=[0, 1, 0, 0, 0, 4, 1])

    sparse_mutation(rng, genome, max_steps=5)

    assert genome == bytearray([16])
    assert not rng.ints
