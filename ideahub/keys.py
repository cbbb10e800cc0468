"""
Developer-mode API keys.

Keys a user pastes in developer mode live only in their browser session
(any mutable mapping, normally `flask.session`). They are never written
to the database and are dropped on sign-out.
"""

from typing import Dict, MutableMapping, Optional

# provider -> session key
DEV_KEY_SLOTS = {
    "deepseek": "dev_deepseek_key",
    "google_ai": "dev_google_ai_key",
}


class DevKeyStore:
    """Read and write per-session developer keys."""

    def __init__(self, session: MutableMapping):
        self.session = session

    @staticmethod
    def _slot(provider: str) -> str:
        try:
            return DEV_KEY_SLOTS[provider]
        except KeyError:
            raise ValueError(f"Unknown key provider: {provider!r}") from None

    def _checked_slot(self, provider: str, key) -> str:
        slot = self._slot(provider)
        if key is not None and not isinstance(key, str):
            raise ValueError(f"{provider} key must be a string")
        return slot

    def get(self, provider: str) -> Optional[str]:
        return self.session.get(self._slot(provider)) or None

    def set(self, provider: str, key: Optional[str]) -> None:
        """Store a key; a blank key removes it."""
        slot = self._checked_slot(provider, key)
        key = (key or "").strip()
        if key:
            self.session[slot] = key
        else:
            self.session.pop(slot, None)

    def update(self, keys: Dict[str, Optional[str]]) -> None:
        for provider, key in keys.items():
            self._checked_slot(provider, key)
        for provider, key in keys.items():
            self.set(provider, key)

    def clear(self) -> None:
        for slot in DEV_KEY_SLOTS.values():
            self.session.pop(slot, None)

    def configured(self) -> Dict[str, bool]:
        """Which providers have a key, without exposing the keys."""
        return {provider: bool(self.session.get(slot)) for provider, slot in DEV_KEY_SLOTS.items()}
