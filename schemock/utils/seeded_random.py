# -*- coding: utf-8 -*-
"""Location: ./schemock/utils/seeded_random.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Seeded Random Source.

A small random number source used by every generation step. With a seed it
runs a linear congruential recurrence (``state = (state * A + C) mod M``) so
the stream is bit-for-bit reproducible for a fixed seed and call sequence.
Without a seed it draws from a non-deterministic ``random.Random`` instance.

A single instance may be shared by concurrent request handlers, so every
state transition happens under a lock.

Examples:
    >>> a = SeededRandom(42)
    >>> b = SeededRandom(42)
    >>> [a.next_int(1, 6) for _ in range(5)] == [b.next_int(1, 6) for _ in range(5)]
    True
    >>> a.reset()
    >>> first = a.next()
    >>> a.reset()
    >>> a.next() == first
    True
    >>> 0.0 <= SeededRandom().next() < 1.0
    True
"""

# Standard
import math
import random
import threading
from typing import Optional, Sequence, TypeVar
import uuid

T = TypeVar("T")

# Numerical Recipes constants
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2**32


class SeededRandom:
    """Deterministic (seeded) or non-deterministic random number source.

    Attributes:
        seed: The active seed, or None for the non-deterministic fallback.
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize the source.

        Args:
            seed: Optional seed. None selects the non-deterministic fallback.
        """
        self._lock = threading.Lock()
        self.seed: Optional[int] = None
        self._state = 0
        self._fallback = random.Random()  # nosec B311 - mock data, not cryptography
        self.set_seed(seed)

    @property
    def deterministic(self) -> bool:
        """Whether the stream is reproducible.

        Returns:
            bool: True when a seed is set.
        """
        return self.seed is not None

    def set_seed(self, seed: Optional[int]) -> None:
        """Switch to a new seed (or to the non-deterministic fallback).

        Args:
            seed: New seed, or None.

        Examples:
            >>> r = SeededRandom()
            >>> r.set_seed(1)
            >>> r.deterministic
            True
        """
        with self._lock:
            self.seed = seed
            self._state = seed % LCG_MODULUS if seed is not None else 0
            if seed is None:
                self._fallback.seed()

    def reset(self) -> None:
        """Rewind the stream to the initial state of the current seed."""
        self.set_seed(self.seed)

    def next(self) -> float:
        """Return the next float in ``[0, 1)``.

        Returns:
            float: Next value of the stream.
        """
        with self._lock:
            if self.seed is None:
                return self._fallback.random()
            self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
            return self._state / LCG_MODULUS

    def next_int(self, low: int, high: int) -> int:
        """Return an integer in ``[low, high]`` (both inclusive).

        Args:
            low: Lower bound.
            high: Upper bound; values below ``low`` collapse to ``low``.

        Returns:
            int: Drawn integer.

        Examples:
            >>> r = SeededRandom(3)
            >>> all(0 <= r.next_int(0, 3) <= 3 for _ in range(100))
            True
            >>> r.next_int(5, 2)
            5
        """
        if high <= low:
            return low
        return low + min(int(math.floor(self.next() * (high - low + 1))), high - low)

    def next_float(self, low: float, high: float) -> float:
        """Return a float in ``[low, high)``.

        Args:
            low: Lower bound.
            high: Upper bound.

        Returns:
            float: Drawn value.
        """
        if high <= low:
            return float(low)
        return low + self.next() * (high - low)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly.

        Args:
            items: Non-empty sequence.

        Returns:
            The chosen element.

        Raises:
            IndexError: If ``items`` is empty.

        Examples:
            >>> SeededRandom(9).choice(["only"])
            'only'
        """
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def uuid4(self) -> str:
        """Build a version 4 UUID from the stream.

        Returns:
            str: Canonical UUID string, reproducible under a seed.

        Examples:
            >>> SeededRandom(5).uuid4() == SeededRandom(5).uuid4()
            True
            >>> uuid.UUID(SeededRandom(5).uuid4()).version
            4
        """
        value = 0
        for _ in range(4):
            value = (value << 32) | self.next_int(0, LCG_MODULUS - 1)
        return str(uuid.UUID(int=value, version=4))
