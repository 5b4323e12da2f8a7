from .base import Base

# import models so create_all can discover mappers
from .team import Team  # noqa: F401
from .draw import Draw, Group, GroupTeam  # noqa: F401

__all__ = [
    "Base",
    "Team",
    "Draw",
    "Group",
    "GroupTeam",
]
