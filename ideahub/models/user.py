"""Authenticated user and their public profile."""

from dataclasses import dataclass, asdict
from typing import Optional


DEFAULT_AVATAR_COLOR = "#8B5CF6"


@dataclass
class User:
    """Identity returned by the auth service."""
    id: str
    email: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(id=data["id"], email=data.get("email") or "")


@dataclass
class Profile:
    """Row of the `profiles` table, created by the backend on sign-up."""
    user_id: str
    display_name: Optional[str] = None
    avatar_color: str = DEFAULT_AVATAR_COLOR

    @property
    def initials(self) -> str:
        """Initials of the display name, "U" when there is none."""
        if not self.display_name or not self.display_name.strip():
            return "U"
        return "".join(part[0] for part in self.display_name.split()).upper()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["initials"] = self.initials
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        return cls(
            user_id=data.get("user_id") or data.get("id"),
            display_name=data.get("display_name"),
            avatar_color=data.get("avatar_color") or DEFAULT_AVATAR_COLOR,
        )
