"""Settings repository: the per-user UserSettings singleton."""

from dataclasses import replace
from typing import Optional

from loguru import logger

from ideahub.models.settings import UserSettings
from ideahub.repositories.base import UserScopedRepository, ValidationError
from ideahub.storage.base import StorageError


class SettingsRepository(UserScopedRepository):
    """
    Loads and saves the user's feature toggles.

    `settings` always holds a usable value: defaults until a row is
    loaded, and the last confirmed value after a failed save.
    """

    def __init__(self, storage, sessions, notifier=None):
        super().__init__(storage, sessions, notifier)
        self.settings = UserSettings(user_id=self.user_id)

    def load(self) -> UserSettings:
        if not self.user_id:
            self.settings = UserSettings()
            return self.settings

        self.loading = True
        try:
            stored = self.storage.get_settings(self.user_id)
            self.settings = stored or UserSettings(user_id=self.user_id)
            self.loaded = True
        except StorageError as e:
            logger.error(f"Error loading settings: {e}")
            self.notifier.error("Error loading settings", "Please try again.")
        finally:
            self.loading = False
        return self.settings

    def save(self, **changes) -> Optional[UserSettings]:
        """
        Upsert the current settings merged with `changes`.

        Raises:
            ValidationError: For unknown keys or invalid values.
        """
        if not self.user_id:
            return None

        try:
            merged = replace(self.settings, user_id=self.user_id).merged(changes)
        except (ValueError, TypeError) as e:
            raise ValidationError(str(e)) from e

        try:
            saved = self.storage.save_settings(merged)
        except StorageError as e:
            logger.error(f"Error saving settings: {e}")
            self.notifier.error("Error saving settings", "Please try again.")
            return None

        self.settings = saved
        self.notifier.success("Settings saved", "Your preferences have been updated.")
        return saved
