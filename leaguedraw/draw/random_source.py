"""Sources of uniformly distributed integers used by the group draw."""

from __future__ import annotations

import random
from itertools import cycle
from typing import Optional


class RandomSource:
    """Supplies integers in ``[0, max_value)``.

    Subclasses implement :meth:`_next`; :meth:`next` validates the bound.
    """

    def next(self, max_value: int) -> int:
        if max_value <= 0:
            raise ValueError("max_value must be positive")
        return self._next(max_value)

    def _next(self, max_value: int) -> int:  # pragma: no cover - abstract
        raise NotImplementedError


class SystemRandomSource(RandomSource):
    """Default source backed by :class:`random.Random`.

    Parameters
    ----------
    seed : Optional[int], default: None
        Seed for reproducible draws. ``None`` seeds from the operating
        system, which is what the service uses in production.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)

    def _next(self, max_value: int) -> int:
        return self._random.randrange(max_value)


class FixedRandomSource(RandomSource):
    """Replays a fixed sequence of values, wrapped into range with modulo.

    ``FixedRandomSource()`` always returns ``0``, i.e. the first eligible
    choice everywhere.
    """

    def __init__(self, *values: int) -> None:
        if any(v < 0 for v in values):
            raise ValueError("values must be non-negative")
        self._values = cycle(values or (0,))
        self.calls: list[int] = []

    def _next(self, max_value: int) -> int:
        self.calls.append(max_value)
        return next(self._values) % max_value
