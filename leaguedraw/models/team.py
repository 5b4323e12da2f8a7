"""Reference data: the teams that can be drawn into groups."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class Team(Base):
    """A football team tagged with the country and city it represents.

    Teams are seeded once and never modified afterwards; draws only reference
    them through :class:`GroupTeam` rows.
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    """Display name, unique across the roster."""

    country: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    """Country used by the one-team-per-country group constraint."""

    city: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp when the team row was seeded."""

    __table_args__ = (UniqueConstraint("name", name="teams_name_key"),)

    def __init__(
        self,
        name: str,
        country: str,
        city: str,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.country = country
        self.city = city
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<Team(id={self.id}, name={self.name}, country={self.country})>"

    @classmethod
    def get_by_name(cls, session: Session, name: str) -> Optional["Team"]:
        """Return the team called ``name`` if it exists."""

        return session.scalar(select(cls).where(cls.name == name))
