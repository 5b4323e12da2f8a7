"""Backend-independent storage contract for draws."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..results import DrawResult


class DrawRepository(ABC):
    """Stores and retrieves draw results.

    Every implementation must write a draw (groups and team memberships
    included) as a unit, and raise :class:`~leaguedraw.errors.StorageError`
    for backend failures. Callers never depend on which backend is used.
    """

    @abstractmethod
    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        """Persist ``result`` and return it with its new ``id`` populated.

        Raises :class:`~leaguedraw.errors.InvalidArgumentError`, before
        anything is written, if ``number_of_groups`` is not 4 or 8.
        """

    @abstractmethod
    def get_all(self) -> list[DrawResult]:
        """Return every stored draw, newest first."""

    @abstractmethod
    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        """Return the draw with ``draw_id`` or ``None`` if it does not exist."""
