"""Group repository: same contract as IdeaRepository, applied to idea_groups."""

from typing import List, Optional, Union

from loguru import logger

from ideahub.models.group import IdeaGroup, GROUP_WRITABLE_FIELDS
from ideahub.repositories.base import UserScopedRepository, ValidationError, clean_text
from ideahub.storage.base import StorageError


class GroupRepository(UserScopedRepository):
    """
    Groups of the current user.

    Removing a group does not touch its ideas here; the backend clears
    their group_id.
    """

    def __init__(self, storage, sessions, notifier=None):
        super().__init__(storage, sessions, notifier)
        self.groups: List[IdeaGroup] = []

    def load(self) -> List[IdeaGroup]:
        if not self.user_id:
            self.groups = []
            return self.groups

        self.loading = True
        try:
            self.groups = self.storage.list_groups(self.user_id)
            self.loaded = True
        except StorageError as e:
            logger.error(f"Error loading groups: {e}")
            self.notifier.error("Error loading groups", "Failed to load your idea groups.")
        finally:
            self.loading = False
        return self.groups

    def get(self, group_id: str) -> Optional[IdeaGroup]:
        return next((g for g in self.groups if g.id == group_id), None)

    @staticmethod
    def _normalize(fields: dict) -> dict:
        unknown = set(fields) - set(GROUP_WRITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown group field(s): {', '.join(sorted(unknown))}")
        fields = dict(fields)
        if "name" in fields:
            name = fields["name"]
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("Group name is required")
            fields["name"] = name.strip()
        if "description" in fields:
            fields["description"] = clean_text(fields["description"], "description")
        return fields

    def add(self, draft: Union[IdeaGroup, dict]) -> Optional[IdeaGroup]:
        if not self.user_id:
            return None

        fields = draft.to_row() if isinstance(draft, IdeaGroup) else dict(draft)
        fields.pop("user_id", None)
        fields = self._normalize(fields)
        if "name" not in fields:
            raise ValidationError("Group name is required")

        try:
            group = IdeaGroup(user_id=self.user_id, **fields)
        except (ValueError, TypeError) as e:
            raise ValidationError(str(e)) from e

        try:
            created = self.storage.create_group(group)
        except StorageError as e:
            logger.error(f"Error creating group: {e}")
            self.notifier.error("Error creating group", "Failed to create the group. Please try again.")
            return None

        self.groups = [created] + self.groups
        self.notifier.success("Group created! 🎉", f'"{created.name}" group has been created.')
        return created

    def update(self, group_id: str, updates: dict) -> Optional[IdeaGroup]:
        if not self.user_id:
            return None

        fields = self._normalize(updates)
        if not fields:
            raise ValidationError("No fields to update")

        current = self.get(group_id)
        if current is not None:
            try:
                current.with_updates(fields)
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e)) from e

        try:
            updated = self.storage.update_group(self.user_id, group_id, fields)
        except StorageError as e:
            logger.error(f"Error updating group {group_id}: {e}")
            self.notifier.error("Error updating group", "Failed to update the group. Please try again.")
            return None

        self.groups = [updated if g.id == group_id else g for g in self.groups]
        self.notifier.success("Group updated", "Your group has been updated successfully.")
        return updated

    def remove(self, group_id: str) -> bool:
        if not self.user_id:
            return False

        try:
            self.storage.delete_group(self.user_id, group_id)
        except StorageError as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            self.notifier.error("Error deleting group", "Failed to delete the group. Please try again.")
            return False

        self.groups = [g for g in self.groups if g.id != group_id]
        self.notifier.success("Group deleted", "The group has been removed.")
        return True
