"""
Data models module.

Defines data structures for ideas, groups, user settings and profiles.
"""

from ideahub.models.idea import (
    Idea,
    IDEA_STATUSES,
    IDEA_COLORS,
    STATUS_LABELS,
    DEFAULT_STATUS,
    DEFAULT_COLOR,
    WRITABLE_FIELDS,
)
from ideahub.models.group import IdeaGroup, GROUP_COLORS, GROUP_ICONS, GROUP_WRITABLE_FIELDS
from ideahub.models.settings import UserSettings, THEMES, SETTING_FIELDS
from ideahub.models.user import User, Profile

__all__ = [
    "Idea",
    "IDEA_STATUSES",
    "IDEA_COLORS",
    "STATUS_LABELS",
    "DEFAULT_STATUS",
    "DEFAULT_COLOR",
    "WRITABLE_FIELDS",
    "IdeaGroup",
    "GROUP_COLORS",
    "GROUP_ICONS",
    "GROUP_WRITABLE_FIELDS",
    "UserSettings",
    "THEMES",
    "SETTING_FIELDS",
    "User",
    "Profile",
]
