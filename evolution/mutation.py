"""Mutation strategies flipping single bits of a child genome.

Both strategies mutate the given buffer in place and return it. Callers pass
the freshly recombined child, never a parent's genome.
"""

from __future__ import annotations

from core.random_source import RandomStream


def _flip_random_bit(rng: RandomStream, genome: bytearray) -> None:
    pivot_byte = rng.int_below(len(genome))
    # Modulo 9 keeps a ninth outcome whose mask is zero, i.e. a no-op flip.
    pivot_bit = rng.int_below(9)
    genome[pivot_byte] ^= (1 << pivot_bit) & 0xFF


def single_bit_mutation(rng: RandomStream, genome: bytearray, max_flips: int | None = None) -> bytearray:
    """Flip a geometrically distributed number of random bits.

    Each round stops with probability 1/2, otherwise flips one bit and goes
    again. The number of flips is capped at ``max_flips`` (genome length by
    default).
    """
    if not genome:
        return genome
    limit = len(genome) if max_flips is None else max_flips

    flips = 0
    while flips < limit:
        if rng.int_below(2) != 0:
            break
        _flip_random_bit(rng, genome)
        flips += 1
    return genome


def sparse_mutation(rng: RandomStream, genome: bytearray, max_steps: int | None = None) -> bytearray:
    """Like ``single_bit_mutation`` but each continuing round flips only half the time."""
    if not genome:
        return genome
    limit = len(genome) if max_steps is None else max_steps

    steps = 0
    while steps < limit:
        if rng.int_below(2) != 0:
            break
        if rng.int_below(2) == 0:
            _flip_random_bit(rng, genome)
        steps += 1
    return genome
