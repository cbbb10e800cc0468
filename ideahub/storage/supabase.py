"""
Supabase storage backend for Idea Hub.

Implements the Storage interface on top of Supabase's REST surfaces:
PostgREST for tables and the Storage API for image blobs. All calls go
through `requests`; the signed-in user's access token is forwarded so row
level security applies on the server as well.

PostgREST docs: https://postgrest.org/en/stable/references/api.html

=============================================================================
SUPABASE SCHEMA
=============================================================================

ideas
| Column               | Type        | Notes                                  |
|----------------------|-------------|----------------------------------------|
| id                   | uuid        | default gen_random_uuid()              |
| user_id              | uuid        | references auth.users                  |
| title                | text        | not null                               |
| description          | text        |                                        |
| status               | text        | idea/research/progress/launched/archived|
| tags                 | text[]      |                                        |
| color                | text        |                                        |
| image_url            | text        | public bucket URL or data URL          |
| original_description | text        | pre-enhancement text                   |
| group_id             | uuid        | references idea_groups ON DELETE SET NULL |
| created_at           | timestamptz | default now()                          |
| updated_at           | timestamptz | trigger-maintained                     |

idea_groups: id, user_id, name, description, color, icon, created_at, updated_at
user_settings: user_id (unique), auto_image_generation, ai_description_enhancement,
               markdown_preview, developer_mode, theme
profiles: user_id, display_name, avatar_color

Bucket: SUPABASE_IMAGE_BUCKET (public), objects stored as <user_id>/<filename>.

=============================================================================
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import requests

from loguru import logger

from ideahub.config import (
    SUPABASE_URL,
    SUPABASE_ANON_KEY,
    SUPABASE_IMAGE_BUCKET,
    REQUEST_TIMEOUT,
)
from ideahub.models.idea import Idea, WRITABLE_FIELDS
from ideahub.models.group import IdeaGroup, GROUP_WRITABLE_FIELDS
from ideahub.models.settings import UserSettings
from ideahub.models.user import Profile
from ideahub.storage.base import Storage, StorageError


IDEAS_TABLE = "ideas"
GROUPS_TABLE = "idea_groups"
SETTINGS_TABLE = "user_settings"
PROFILES_TABLE = "profiles"


class SupabaseStorage(Storage):
    """
    Supabase-backed storage implementation.

    Configuration is pulled from environment variables via ideahub.config:
    - SUPABASE_URL: project URL
    - SUPABASE_ANON_KEY: public anon key (sent as `apikey`)
    - SUPABASE_IMAGE_BUCKET: bucket for idea images
    """

    def __init__(
        self,
        access_token: str = None,
        url: str = None,
        anon_key: str = None,
        bucket: str = None,
    ):
        """
        Initialize SupabaseStorage.

        Args:
            access_token: JWT of the signed-in user. Falls back to the anon key.
            url: Project URL. Defaults to config.SUPABASE_URL.
            anon_key: Anon key. Defaults to config.SUPABASE_ANON_KEY.
            bucket: Image bucket. Defaults to config.SUPABASE_IMAGE_BUCKET.
        """
        # Use provided values, or fall back to config if None (not empty string)
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else SUPABASE_ANON_KEY
        self.bucket = bucket if bucket is not None else SUPABASE_IMAGE_BUCKET
        self.access_token = access_token

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def _rest_url(self) -> str:
        return f"{self.url}/rest/v1"

    @property
    def _headers(self) -> Dict[str, str]:
        """Construct headers for PostgREST requests."""
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise StorageError("SUPABASE_URL is not configured")
        if not self.anon_key:
            raise StorageError("SUPABASE_ANON_KEY is not configured")

    # =========================================================================
    # HTTP plumbing
    # =========================================================================

    def _request(
        self,
        method: str,
        table: str,
        params: Dict[str, str] = None,
        payload: Any = None,
        headers: Dict[str, str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Issue one PostgREST request and return the decoded rows.

        Raises:
            StorageError: On transport failure or a non-2xx response.
        """
        self._validate_config()

        request_headers = dict(self._headers)
        if headers:
            request_headers.update(headers)

        try:
            response = requests.request(
                method,
                f"{self._rest_url}/{table}",
                headers=request_headers,
                params=params,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise StorageError(f"{method} {table} failed: {e}") from e

        if not response.ok:
            raise StorageError(
                f"{method} {table} failed ({response.status_code}): {self._error_message(response)}",
                status_code=response.status_code,
            )

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Pull PostgREST's `message` field out of an error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or response.text
        return response.text

    @staticmethod
    def _owned(user_id: str, row_id: str = None) -> Dict[str, str]:
        """PostgREST filter scoping a query to one user (and optionally one row)."""
        params = {"user_id": f"eq.{user_id}"}
        if row_id is not None:
            params["id"] = f"eq.{row_id}"
        return params

    @staticmethod
    def _single(rows: List[Dict[str, Any]], table: str, row_id: str = None) -> Dict[str, Any]:
        if not rows:
            raise StorageError(f"No {table} row matched id={row_id}", status_code=404)
        return rows[0]

    # =========================================================================
    # Ideas
    # =========================================================================

    def list_ideas(self, user_id: str) -> List[Idea]:
        params = self._owned(user_id)
        params.update({"select": "*", "order": "created_at.desc"})
        rows = self._request("GET", IDEAS_TABLE, params=params)

        ideas = []
        for row in rows:
            try:
                ideas.append(Idea.from_dict(row))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed idea row {row.get('id')}: {e}")
        return ideas

    def create_idea(self, idea: Idea) -> Idea:
        rows = self._request("POST", IDEAS_TABLE, payload=idea.to_row())
        return Idea.from_dict(self._single(rows, IDEAS_TABLE))

    def update_idea(self, user_id: str, idea_id: str, updates: dict) -> Idea:
        rows = self._request(
            "PATCH", IDEAS_TABLE, params=self._owned(user_id, idea_id), payload=updates
        )
        return Idea.from_dict(self._single(rows, IDEAS_TABLE, idea_id))

    def delete_idea(self, user_id: str, idea_id: str) -> None:
        self._request("DELETE", IDEAS_TABLE, params=self._owned(user_id, idea_id))

    # =========================================================================
    # Groups
    # =========================================================================

    def list_groups(self, user_id: str) -> List[IdeaGroup]:
        params = self._owned(user_id)
        params.update({"select": "*", "order": "created_at.desc"})
        rows = self._request("GET", GROUPS_TABLE, params=params)
        return [IdeaGroup.from_dict(row) for row in rows]

    def create_group(self, group: IdeaGroup) -> IdeaGroup:
        rows = self._request("POST", GROUPS_TABLE, payload=group.to_row())
        return IdeaGroup.from_dict(self._single(rows, GROUPS_TABLE))

    def update_group(self, user_id: str, group_id: str, updates: dict) -> IdeaGroup:
        rows = self._request(
            "PATCH", GROUPS_TABLE, params=self._owned(user_id, group_id), payload=updates
        )
        return IdeaGroup.from_dict(self._single(rows, GROUPS_TABLE, group_id))

    def delete_group(self, user_id: str, group_id: str) -> None:
        self._request("DELETE", GROUPS_TABLE, params=self._owned(user_id, group_id))

    # =========================================================================
    # Settings and profile
    # =========================================================================

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        params = self._owned(user_id)
        params.update({"select": "*", "limit": "1"})
        rows = self._request("GET", SETTINGS_TABLE, params=params)
        if not rows:
            return None
        return UserSettings.from_dict(rows[0])

    def save_settings(self, settings: UserSettings) -> UserSettings:
        if not settings.user_id:
            raise StorageError("Settings must belong to a user")
        rows = self._request(
            "POST",
            SETTINGS_TABLE,
            params={"on_conflict": "user_id"},
            payload=settings.to_dict(),
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        return UserSettings.from_dict(self._single(rows, SETTINGS_TABLE))

    def get_profile(self, user_id: str) -> Optional[Profile]:
        params = self._owned(user_id)
        params.update({"select": "*", "limit": "1"})
        rows = self._request("GET", PROFILES_TABLE, params=params)
        return Profile.from_dict(rows[0]) if rows else None

    # =========================================================================
    # Object storage
    # =========================================================================

    def public_url(self, path: str) -> str:
        """Public URL of an object in the image bucket."""
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    def upload_image(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str = "image/png",
    ) -> str:
        """
        Upload an image to `<bucket>/<user_id>/<filename>`.

        The same filename overwrites the previous object (x-upsert).

        Returns:
            Public URL of the stored object.
        """
        self._validate_config()

        path = f"{user_id}/{filename}"
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": content_type,
            "x-upsert": "true",
        }

        try:
            response = requests.post(
                f"{self.url}/storage/v1/object/{self.bucket}/{path}",
                headers=headers,
                data=data,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise StorageError(f"Image upload failed: {e}") from e

        if not response.ok:
            raise StorageError(
                f"Image upload failed ({response.status_code}): {self._error_message(response)}",
                status_code=response.status_code,
            )

        return self.public_url(path)


class MockSupabaseStorage(Storage):
    """
    In-memory mock storage for testing and development.

    Use this when Supabase is not configured or for testing. Mirrors the
    server's behavior where callers can observe it: ids and timestamps are
    assigned on write, lists come back newest-first, and deleting a group
    clears `group_id` on its ideas. Data is lost when the process ends.
    """

    BASE_URL = "https://mock.supabase.local"

    def __init__(self, bucket: str = "idea-images"):
        self.bucket = bucket
        self._ideas: Dict[str, Idea] = {}
        self._groups: Dict[str, IdeaGroup] = {}
        self._settings: Dict[str, UserSettings] = {}
        self._profiles: Dict[str, Profile] = {}
        self._objects: Dict[str, bytes] = {}
        self._sequence: Dict[str, int] = {}
        self._counter = 0
        # Operation names that should raise StorageError (for testing)
        self.failing: set = set()

    @property
    def name(self) -> str:
        return "mock"

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise StorageError(f"Simulated failure in {operation}", status_code=500)

    def _stamp(self, row_id: str) -> datetime:
        self._counter += 1
        self._sequence[row_id] = self._counter
        return datetime.now(timezone.utc)

    def _newest_first(self, rows):
        return sorted(
            rows,
            key=lambda row: (row.created_at, self._sequence.get(row.id, 0)),
            reverse=True,
        )

    @staticmethod
    def _clean_updates(updates: dict, allowed: tuple) -> dict:
        unknown = set(updates) - set(allowed)
        if unknown:
            raise StorageError(
                f"Unknown column(s): {', '.join(sorted(unknown))}", status_code=400
            )
        return dict(updates)

    # Ideas ------------------------------------------------------------------

    def list_ideas(self, user_id: str) -> List[Idea]:
        self._check("list_ideas")
        return self._newest_first(
            idea for idea in self._ideas.values() if idea.user_id == user_id
        )

    def create_idea(self, idea: Idea) -> Idea:
        self._check("create_idea")
        if not idea.user_id:
            raise StorageError("user_id is required", status_code=400)
        idea_id = str(uuid.uuid4())
        now = self._stamp(idea_id)
        stored = replace(idea, id=idea_id, tags=list(idea.tags), created_at=now, updated_at=now)
        self._ideas[idea_id] = stored
        return stored

    def update_idea(self, user_id: str, idea_id: str, updates: dict) -> Idea:
        self._check("update_idea")
        existing = self._ideas.get(idea_id)
        if existing is None or existing.user_id != user_id:
            raise StorageError(f"No ideas row matched id={idea_id}", status_code=404)
        changes = self._clean_updates(updates, WRITABLE_FIELDS)
        try:
            updated = existing.with_updates(changes)
        except ValueError as e:
            raise StorageError(str(e), status_code=400) from e
        updated = replace(updated, updated_at=datetime.now(timezone.utc))
        self._ideas[idea_id] = updated
        return updated

    def delete_idea(self, user_id: str, idea_id: str) -> None:
        self._check("delete_idea")
        existing = self._ideas.get(idea_id)
        if existing is not None and existing.user_id == user_id:
            del self._ideas[idea_id]

    # Groups -----------------------------------------------------------------

    def list_groups(self, user_id: str) -> List[IdeaGroup]:
        self._check("list_groups")
        return self._newest_first(
            group for group in self._groups.values() if group.user_id == user_id
        )

    def create_group(self, group: IdeaGroup) -> IdeaGroup:
        self._check("create_group")
        if not group.user_id:
            raise StorageError("user_id is required", status_code=400)
        group_id = str(uuid.uuid4())
        now = self._stamp(group_id)
        stored = replace(group, id=group_id, created_at=now, updated_at=now)
        self._groups[group_id] = stored
        return stored

    def update_group(self, user_id: str, group_id: str, updates: dict) -> IdeaGroup:
        self._check("update_group")
        existing = self._groups.get(group_id)
        if existing is None or existing.user_id != user_id:
            raise StorageError(f"No idea_groups row matched id={group_id}", status_code=404)
        changes = self._clean_updates(updates, GROUP_WRITABLE_FIELDS)
        try:
            updated = existing.with_updates(changes)
        except ValueError as e:
            raise StorageError(str(e), status_code=400) from e
        updated = replace(updated, updated_at=datetime.now(timezone.utc))
        self._groups[group_id] = updated
        return updated

    def delete_group(self, user_id: str, group_id: str) -> None:
        self._check("delete_group")
        existing = self._groups.get(group_id)
        if existing is None or existing.user_id != user_id:
            return
        del self._groups[group_id]
        # ON DELETE SET NULL
        for idea_id, idea in list(self._ideas.items()):
            if idea.group_id == group_id:
                self._ideas[idea_id] = replace(idea, group_id=None)

    # Settings and profile -----------------------------------------------------

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        self._check("get_settings")
        return self._settings.get(user_id)

    def save_settings(self, settings: UserSettings) -> UserSettings:
        self._check("save_settings")
        if not settings.user_id:
            raise StorageError("Settings must belong to a user")
        self._settings[settings.user_id] = settings
        return settings

    def add_profile(self, profile: Profile) -> None:
        """Seed a profile row (the real backend creates it on sign-up)."""
        self._profiles[profile.user_id] = profile

    def get_profile(self, user_id: str) -> Optional[Profile]:
        self._check("get_profile")
        return self._profiles.get(user_id)

    # Object storage -----------------------------------------------------------

    def upload_image(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str = "image/png",
    ) -> str:
        self._check("upload_image")
        path = f"{user_id}/{filename}"
        self._objects[path] = data
        return f"{self.BASE_URL}/storage/v1/object/public/{self.bucket}/{path}"

    # Test helpers -------------------------------------------------------------

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._ideas.clear()
        self._groups.clear()
        self._settings.clear()
        self._profiles.clear()
        self._objects.clear()
        self._sequence.clear()

    def count(self) -> int:
        """Return number of stored ideas (for testing)."""
        return len(self._ideas)
