"""Per-user feature toggles (`user_settings` table)."""

from dataclasses import dataclass, asdict, fields, replace
from typing import Optional


THEMES = ("system", "light", "dark")

SETTING_FIELDS = (
    "auto_image_generation",
    "ai_description_enhancement",
    "markdown_preview",
    "developer_mode",
    "theme",
)


@dataclass(frozen=True)
class UserSettings:
    """
    Feature toggles for one user.

    Frozen so a loaded settings object can be handed to actions and
    views without anyone mutating it behind their back; use `merged`.
    """

    user_id: Optional[str] = None
    auto_image_generation: bool = False
    ai_description_enhancement: bool = False
    markdown_preview: bool = True
    developer_mode: bool = False
    theme: str = "system"

    def __post_init__(self) -> None:
        if self.theme not in THEMES:
            raise ValueError(f"theme must be one of {', '.join(THEMES)}, got {self.theme!r}")
        for name in SETTING_FIELDS[:-1]:
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean")

    @property
    def ai_features_enabled(self) -> bool:
        return self.auto_image_generation or self.ai_description_enhancement

    def merged(self, changes: dict) -> "UserSettings":
        """Return new settings with `changes` applied; unknown keys raise ValueError."""
        unknown = set(changes) - set(SETTING_FIELDS)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
