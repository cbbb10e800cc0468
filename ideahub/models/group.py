"""IdeaGroup model: a named, user-owned collection that ideas may belong to."""

from dataclasses import dataclass, asdict, replace
from datetime import datetime
from typing import Optional

from ideahub.models.timestamps import parse_timestamp, format_timestamp


GROUP_COLORS = (
    "#3B82F6", "#EF4444", "#10B981", "#F59E0B",
    "#8B5CF6", "#EC4899", "#06B6D4", "#84CC16",
)

GROUP_ICONS = (
    "📁", "🎯", "💡", "🚀", "⭐", "🎨", "🔧", "📱",
    "💻", "🌟", "🔥", "⚡", "🎪", "🎭",
)

GROUP_WRITABLE_FIELDS = ("name", "description", "color", "icon")


@dataclass
class IdeaGroup:
    """
    A row of the `idea_groups` table.

    Deleting a group leaves its ideas in place; the backend nulls
    `ideas.group_id` (ON DELETE SET NULL).
    """

    name: str
    id: Optional[str] = None
    user_id: Optional[str] = None
    description: str = ""
    color: str = GROUP_COLORS[0]
    icon: str = GROUP_ICONS[0]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            ValueError: If the name is blank or color/icon are empty.
        """
        errors = []
        if not self.name or not self.name.strip():
            errors.append("name is required and cannot be empty")
        if not self.color:
            errors.append("color cannot be empty")
        if not self.icon:
            errors.append("icon cannot be empty")
        if errors:
            raise ValueError(f"IdeaGroup validation failed: {'; '.join(errors)}")

    def with_updates(self, updates: dict) -> "IdeaGroup":
        return replace(self, **updates)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data

    def to_row(self) -> dict:
        row = {name: getattr(self, name) for name in GROUP_WRITABLE_FIELDS}
        if self.user_id:
            row["user_id"] = self.user_id
        return row

    @classmethod
    def from_dict(cls, data: dict) -> "IdeaGroup":
        known = {name for name in cls.__dataclass_fields__}
        values = {key: value for key, value in data.items() if key in known}
        values["description"] = values.get("description") or ""
        values["created_at"] = parse_timestamp(values.get("created_at"))
        values["updated_at"] = parse_timestamp(values.get("updated_at"))
        return cls(**values)

    def __repr__(self) -> str:
        return f"IdeaGroup(id={self.id!r}, name={self.name!r})"
