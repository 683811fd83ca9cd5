"""Byte-target evaluation: how far a genome is from a fixed target buffer."""

from __future__ import annotations

from evolution.base import EvaluationFunc
from genome.codec import GenomeReader


def make_target_evaluation(target: bytes) -> EvaluationFunc:
    """Return an evaluation scoring the summed absolute byte difference to ``target``.

    Lower is better; a perfect match scores 0. A genome of the wrong length is
    a schema mismatch and raises ``ValueError``.
    """
    expected = bytes(target)

    def evaluate(reader: GenomeReader) -> float:
        if len(reader) != len(expected):
            raise ValueError(f"Genome length {len(reader)} does not match target length {len(expected)}.")
        reader.seek(0)
        distance = 0
        for wanted in expected:
            distance += abs(reader.read_uint8() - wanted)
        return float(distance)

    return evaluate
