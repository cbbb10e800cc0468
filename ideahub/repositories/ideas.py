"""
Idea repository.

Loads the signed-in user's ideas newest-first and keeps an in-memory copy
in sync with every confirmed write:

    add    -> prepend
    update -> replace in place
    remove -> filter out

Nothing changes locally when the backend call fails; the error is logged
and a notification is queued instead. Without a signed-in user every
operation is a no-op.
"""

from typing import Dict, List, Optional, Union

from loguru import logger

from ideahub.models.idea import Idea, WRITABLE_FIELDS
from ideahub.repositories.base import UserScopedRepository, ValidationError, clean_tags, clean_text
from ideahub.search.filters import collect_tags, count_by_status
from ideahub.storage.base import StorageError


class IdeaRepository(UserScopedRepository):
    """Ideas of the current user, mirrored from the backend."""

    def __init__(self, storage, sessions, notifier=None):
        super().__init__(storage, sessions, notifier)
        self.ideas: List[Idea] = []

    # =========================================================================
    # Reads
    # =========================================================================

    def load(self) -> List[Idea]:
        """Fetch all ideas of the user, newest first."""
        if not self.user_id:
            self.ideas = []
            return self.ideas

        self.loading = True
        try:
            self.ideas = self.storage.list_ideas(self.user_id)
            self.loaded = True
        except StorageError as e:
            logger.error(f"Error loading ideas: {e}")
            self.notifier.error("Error loading ideas", "Failed to load your ideas.")
        finally:
            self.loading = False
        return self.ideas

    def get(self, idea_id: str) -> Optional[Idea]:
        for idea in self.ideas:
            if idea.id == idea_id:
                return idea
        return None

    @property
    def all_tags(self) -> List[str]:
        """Sorted union of every tag in use."""
        return collect_tags(self.ideas)

    @property
    def status_counts(self) -> Dict[str, int]:
        return count_by_status(self.ideas)

    # =========================================================================
    # Input normalization
    # =========================================================================

    @staticmethod
    def _normalize(fields: dict) -> dict:
        """Trim text fields and tags; reject columns the client may not write."""
        unknown = set(fields) - set(WRITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown idea field(s): {', '.join(sorted(unknown))}")

        fields = dict(fields)
        if "title" in fields:
            title = fields["title"]
            if not isinstance(title, str) or not title.strip():
                raise ValidationError("Title is required")
            fields["title"] = title.strip()
        if "description" in fields:
            fields["description"] = clean_text(fields["description"], "description")
        if "tags" in fields:
            fields["tags"] = clean_tags(fields["tags"])
        for optional in ("group_id", "image_url"):
            if optional in fields and fields[optional] == "":
                fields[optional] = None
        return fields

    # =========================================================================
    # Writes
    # =========================================================================

    def add(self, draft: Union[Idea, dict]) -> Optional[Idea]:
        """
        Create an idea and prepend it to the local list.

        Args:
            draft: An Idea or a dict of writable fields.

        Returns:
            The stored Idea, or None if nobody is signed in or the write failed.

        Raises:
            ValidationError: If the draft is invalid (nothing is sent).
        """
        if not self.user_id:
            return None

        fields = draft.to_row() if isinstance(draft, Idea) else dict(draft)
        fields.pop("user_id", None)
        fields = self._normalize(fields)
        if "title" not in fields:
            raise ValidationError("Title is required")

        try:
            idea = Idea(user_id=self.user_id, **fields)
        except (ValueError, TypeError) as e:
            raise ValidationError(str(e)) from e

        try:
            created = self.storage.create_idea(idea)
        except StorageError as e:
            logger.error(f"Error creating idea: {e}")
            self.notifier.error("Error saving idea", "Failed to save the idea. Please try again.")
            return None

        self.ideas = [created] + [i for i in self.ideas if i.id != created.id]
        self.notifier.success("Idea saved!", f'"{created.title}" has been added.')
        logger.info(f"Created idea {created.id} for user {self.user_id}")
        return created

    def update(self, idea_id: str, updates: dict, notify: bool = True) -> Optional[Idea]:
        """
        Apply a partial update and replace the idea in place.

        Returns:
            The updated Idea, or None if nobody is signed in or the write failed.

        Raises:
            ValidationError: If the updates are invalid (nothing is sent).
        """
        if not self.user_id:
            return None

        fields = self._normalize(updates)
        if not fields:
            raise ValidationError("No fields to update")

        current = self.get(idea_id)
        if current is not None:
            try:
                current.with_updates(fields)
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e)) from e

        try:
            updated = self.storage.update_idea(self.user_id, idea_id, fields)
        except StorageError as e:
            logger.error(f"Error updating idea {idea_id}: {e}")
            if notify:
                self.notifier.error("Error updating idea", "Failed to update the idea. Please try again.")
            return None

        self.ideas = [updated if i.id == idea_id else i for i in self.ideas]
        if notify:
            self.notifier.success("Idea updated", "Your idea has been updated successfully.")
        return updated

    def remove(self, idea_id: str) -> bool:
        """Delete an idea and drop it from the local list."""
        if not self.user_id:
            return False

        try:
            self.storage.delete_idea(self.user_id, idea_id)
        except StorageError as e:
            logger.error(f"Error deleting idea {idea_id}: {e}")
            self.notifier.error("Error deleting idea", "Failed to delete the idea. Please try again.")
            return False

        self.ideas = [i for i in self.ideas if i.id != idea_id]
        self.notifier.success("Idea deleted", "The idea has been removed.")
        return True

    def ungroup_local(self, group_id: str) -> None:
        """Mirror the backend's SET NULL after a group was deleted."""
        self.ideas = [
            i.with_updates({"group_id": None}) if i.group_id == group_id else i
            for i in self.ideas
        ]
