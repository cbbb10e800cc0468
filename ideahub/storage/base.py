"""
Base storage abstraction for Idea Hub.

Defines the abstract interface that all storage backends must implement.
Every call is scoped to one owning user; backends never return rows that
belong to someone else.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ideahub.models.idea import Idea
from ideahub.models.group import IdeaGroup
from ideahub.models.settings import UserSettings
from ideahub.models.user import Profile


class StorageError(Exception):
    """Raised when a read or write against the backend fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Storage(ABC):
    """
    Abstract base class for all storage backends.

    Implementations must provide:
    - Idea CRUD (list newest-first, create, partial update, delete)
    - Group CRUD with the same shape
    - Settings read and upsert

    Writes return the row as stored so callers pick up server-assigned
    ids and timestamps.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    # -------------------------------------------------------------------------
    # Ideas
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_ideas(self, user_id: str) -> List[Idea]:
        """
        Retrieve all ideas of a user.

        Returns:
            List of Idea instances, sorted by created_at descending.
        """
        pass

    @abstractmethod
    def create_idea(self, idea: Idea) -> Idea:
        """Insert a new idea (idea.user_id must be set) and return the stored row."""
        pass

    @abstractmethod
    def update_idea(self, user_id: str, idea_id: str, updates: dict) -> Idea:
        """
        Apply a partial update to one idea.

        Raises:
            StorageError: If the idea does not exist for this user.
        """
        pass

    @abstractmethod
    def delete_idea(self, user_id: str, idea_id: str) -> None:
        pass

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_groups(self, user_id: str) -> List[IdeaGroup]:
        pass

    @abstractmethod
    def create_group(self, group: IdeaGroup) -> IdeaGroup:
        pass

    @abstractmethod
    def update_group(self, user_id: str, group_id: str, updates: dict) -> IdeaGroup:
        pass

    @abstractmethod
    def delete_group(self, user_id: str, group_id: str) -> None:
        """Delete a group; member ideas keep existing with group_id cleared."""
        pass

    # -------------------------------------------------------------------------
    # Settings and profile
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        """Return the user's settings row, or None if none was saved yet."""
        pass

    @abstractmethod
    def save_settings(self, settings: UserSettings) -> UserSettings:
        """Insert or replace the settings row for settings.user_id."""
        pass

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Retrieve the public profile of a user.

        Default implementation returns None. Override for backends
        that keep a profiles table.
        """
        return None

    def upload_image(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str = "image/png",
    ) -> str:
        """
        Store an image blob and return its public URL.

        Default implementation refuses; override for backends with
        object storage.

        Raises:
            StorageError: Always, unless overridden.
        """
        raise StorageError(f"{self.name} storage does not support image uploads")

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
