"""Identifier generation for new book records."""

from __future__ import annotations

import random
import threading
from typing import Protocol

# Full positive range of a 32-bit signed integer
DEFAULT_UPPER_BOUND = 2**31 - 1


class IdGenerator(Protocol):
    def next(self) -> str: ...


class RandomIdGenerator:
    """Draws identifiers uniformly from [0, upper_bound).

    SystemRandom reads from the OS entropy source and holds no shared state,
    so concurrent callers need no extra locking.
    """

    def __init__(self, upper_bound: int = DEFAULT_UPPER_BOUND) -> None:
        if upper_bound <= 0:
            raise ValueError("upper_bound must be positive.")
        self.upper_bound = upper_bound
        self._random = random.SystemRandom()

    def next(self) -> str:
        return str(self._random.randrange(self.upper_bound))


class SequentialIdGenerator:
    """Deterministic counter, mostly for tests and reproducible runs."""

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return str(value)
