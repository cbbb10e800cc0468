"""
Repositories module.

User-scoped, in-memory mirrors of the backend tables.
"""

from ideahub.repositories.base import ValidationError, clean_tags, clean_text
from ideahub.repositories.ideas import IdeaRepository
from ideahub.repositories.groups import GroupRepository
from ideahub.repositories.settings import SettingsRepository

__all__ = [
    "ValidationError",
    "clean_tags",
    "clean_text",
    "IdeaRepository",
    "GroupRepository",
    "SettingsRepository",
]
