"""Shared pieces of the user-scoped repositories."""

from typing import Iterable, List, Optional

from ideahub.auth.session import SessionProvider
from ideahub.notifications import Notifier
from ideahub.storage.base import Storage


class ValidationError(ValueError):
    """Input rejected before any call to the backend."""


def clean_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim tags and drop blank ones, keeping order."""
    if tags is None:
        return []
    if isinstance(tags, str):
        raise ValidationError("tags must be a list of strings")
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError("tags must be a list of strings")
        tag = tag.strip()
        if tag:
            cleaned.append(tag)
    return cleaned


def clean_text(value, field: str) -> str:
    """Trim an optional free-text field; None becomes ""."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


class UserScopedRepository:
    """
    Base for repositories that mirror one user's rows in memory.

    Subclasses keep a local list that only changes after the backend
    confirmed a write.
    """

    def __init__(self, storage: Storage, sessions: SessionProvider, notifier: Notifier = None):
        self.storage = storage
        self.sessions = sessions
        self.notifier = notifier if notifier is not None else Notifier()
        self.loading = False
        self.loaded = False

    @property
    def user_id(self) -> Optional[str]:
        user = self.sessions.user
        return user.id if user else None
