"""
Transient user notifications.

The repositories and actions report outcomes here instead of returning
UI strings; the web layer drains them into each JSON response.
"""

from dataclasses import dataclass, asdict
from typing import List


@dataclass
class Notification:
    """One toast-style message."""
    title: str
    description: str = ""
    variant: str = "default"  # default, destructive

    def to_dict(self) -> dict:
        return asdict(self)


class Notifier:
    """Collects notifications for the current request."""

    def __init__(self):
        self._items: List[Notification] = []

    def success(self, title: str, description: str = "") -> None:
        self._items.append(Notification(title, description))

    def error(self, title: str, description: str = "") -> None:
        self._items.append(Notification(title, description, variant="destructive"))

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    def drain(self) -> List[dict]:
        """Return all pending notifications as dicts and forget them."""
        items = [n.to_dict() for n in self._items]
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)
