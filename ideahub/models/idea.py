"""
Core data model for Idea Hub.

Defines the Idea dataclass representing a single app idea owned by a user,
plus the status and color vocabularies the rest of the app validates against.
"""

from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from typing import Optional

from ideahub.models.timestamps import parse_timestamp, format_timestamp


# Lifecycle order; also the order used for dashboard counts
IDEA_STATUSES = ("idea", "research", "progress", "launched", "archived")

STATUS_LABELS = {
    "idea": "💡 Idea",
    "research": "🔬 Researching",
    "progress": "⚙️ In Progress",
    "launched": "🚀 Launched",
    "archived": "🗄️ Archived",
}

IDEA_COLORS = ("yellow", "blue", "green", "pink", "purple", "orange", "gray")

DEFAULT_STATUS = "idea"
DEFAULT_COLOR = "gray"

# Columns the client may write; id, user ownership and timestamps are server-side
WRITABLE_FIELDS = (
    "title",
    "description",
    "status",
    "tags",
    "color",
    "image_url",
    "original_description",
    "group_id",
)


@dataclass
class Idea:
    """
    Represents a single idea record in the `ideas` table.

    Attributes:
        title: Short name of the idea (required, non-blank).
        id: Row identifier assigned by the backend (None until saved).
        user_id: Owning user.
        description: Free text; may be markdown after AI enhancement.
        status: One of IDEA_STATUSES.
        tags: Ordered list of tags (duplicates are not rejected here).
        color: One of IDEA_COLORS.
        image_url: Public URL or data URL of the idea's image.
        original_description: Text before the last AI enhancement (one-level undo).
        group_id: Optional IdeaGroup reference.
        created_at: Assigned by the backend.
        updated_at: Assigned by the backend.
    """

    title: str
    id: Optional[str] = None
    user_id: Optional[str] = None
    description: str = ""
    status: str = DEFAULT_STATUS
    tags: list[str] = field(default_factory=list)
    color: str = DEFAULT_COLOR
    image_url: Optional[str] = None
    original_description: Optional[str] = None
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate that required fields are present and valid.

        Raises:
            ValueError: If validation fails.
        """
        errors = []

        if not self.title or not self.title.strip():
            errors.append("title is required and cannot be empty")

        if self.status not in IDEA_STATUSES:
            errors.append(f"status must be one of {', '.join(IDEA_STATUSES)}, got {self.status!r}")

        if self.color not in IDEA_COLORS:
            errors.append(f"color must be one of {', '.join(IDEA_COLORS)}, got {self.color!r}")

        if not isinstance(self.tags, list):
            errors.append("tags must be a list")

        if errors:
            raise ValueError(f"Idea validation failed: {'; '.join(errors)}")

    @property
    def is_enhanced(self) -> bool:
        """True when an AI enhancement can be undone."""
        return self.original_description is not None

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, self.status)

    def with_updates(self, updates: dict) -> "Idea":
        """Return a copy with `updates` applied (validated)."""
        return replace(self, **updates)

    def to_dict(self) -> dict:
        """
        Convert Idea to a plain dictionary for JSON responses.

        Datetime fields are converted to ISO format strings.
        """
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data

    def to_row(self) -> dict:
        """Columns to send on insert (server fills id and timestamps)."""
        row = {name: getattr(self, name) for name in WRITABLE_FIELDS}
        row["tags"] = list(self.tags)
        if self.user_id:
            row["user_id"] = self.user_id
        return row

    @classmethod
    def from_dict(cls, data: dict) -> "Idea":
        """
        Create an Idea from a backend row or request payload.

        Unknown keys are ignored; ISO strings become datetimes and a null
        tags column becomes an empty list.
        """
        known = {name for name in cls.__dataclass_fields__}
        values = {key: value for key, value in data.items() if key in known}

        values["tags"] = list(values.get("tags") or [])
        values["description"] = values.get("description") or ""
        values["created_at"] = parse_timestamp(values.get("created_at"))
        values["updated_at"] = parse_timestamp(values.get("updated_at"))

        return cls(**values)

    def __str__(self) -> str:
        return f"[{self.status}] {self.title}"

    def __repr__(self) -> str:
        return f"Idea(id={self.id!r}, title={self.title!r}, status={self.status!r})"
