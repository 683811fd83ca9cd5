"""Shared fixtures for evolution tests."""

from __future__ import annotations

from collections import deque
from typing import Iterable

import pytest


class ScriptedRandom:
    """Random source replaying fixed draws so operator outcomes are bit-exact."""

    def __init__(self, ints: Iterable[int] = (), floats: Iterable[float] = (), data: bytes = b"") -> None:
        self.ints = deque(ints)
        self.floats = deque(floats)
        self.data = bytearray(data)

    def uniform(self) -> float:
        return self.floats.popleft()

    def int_below(self, n: int) -> int:
        value = self.ints.popleft()
        assert 0 <= value < n, f"scripted draw {value} outside [0, {n})"
        return value

    def fill(self, n: int) -> bytes:
        chunk = bytes(self.data[:n])
        del self.data[:n]
        assert len(chunk) == n, "scripted byte supply exhausted"
        return chunk


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
