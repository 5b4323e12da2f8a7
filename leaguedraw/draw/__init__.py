"""Group draw algorithm and its random sources."""

from .assignment import (
    DrawAssignment,
    GROUP_NAMES,
    GroupAssignment,
    MAX_DRAW_ATTEMPTS,
    SUPPORTED_GROUP_COUNTS,
    assign_all_teams,
    assign_groups,
    validate_group_count,
)
from .random_source import FixedRandomSource, RandomSource, SystemRandomSource

__all__ = [
    "DrawAssignment",
    "FixedRandomSource",
    "GROUP_NAMES",
    "GroupAssignment",
    "MAX_DRAW_ATTEMPTS",
    "RandomSource",
    "SUPPORTED_GROUP_COUNTS",
    "SystemRandomSource",
    "assign_all_teams",
    "assign_groups",
    "validate_group_count",
]
