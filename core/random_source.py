"""Seeded random source threaded explicitly through every evolutionary operator."""

from __future__ import annotations

import base64
import pickle
import random
from dataclasses import dataclass
from typing import Any, Protocol


class RandomStream(Protocol):
    """Draws the evolutionary operators are allowed to make."""

    def uniform(self) -> float:
        ...

    def int_below(self, n: int) -> int:
        ...

    def fill(self, n: int) -> bytes:
        ...


@dataclass
class RandomSource:
    """Owns one deterministic RNG stream without touching global random state.

    A run is reproducible from ``seed`` alone as long as every draw goes
    through this object in the same order.
    """

    seed: int

    def __post_init__(self) -> None:
        self.python_rng = random.Random(self.seed)

    def uniform(self) -> float:
        """Return a float in ``[0, 1)``."""
        return self.python_rng.random()

    def int_below(self, n: int) -> int:
        """Return an int in ``[0, n)``."""
        if n <= 0:
            raise ValueError("int_below requires n > 0")
        return self.python_rng.randrange(n)

    def fill(self, n: int) -> bytes:
        """Return ``n`` uniformly random bytes."""
        if n < 0:
            raise ValueError("fill requires n >= 0")
        return self.python_rng.randbytes(n)

    def snapshot(self) -> dict[str, Any]:
        """Export RNG state to JSON-compatible dictionary."""
        return {
            "seed": self.seed,
            "python_rng_state": base64.b64encode(pickle.dumps(self.python_rng.getstate())).decode("ascii"),
        }

    def restore(self, state: dict[str, Any]) -> None:
        """Restore RNG state exported by ``snapshot``."""
        self.seed = int(state["seed"])
        self.python_rng = random.Random(self.seed)
        py_state = pickle.loads(base64.b64decode(state["python_rng_state"].encode("ascii")))
        self.python_rng.setstate(py_state)
