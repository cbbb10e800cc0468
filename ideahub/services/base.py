"""Result type shared by the external service clients."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# error_kind values
MISSING_INPUT = "missing_input"
NOT_CONFIGURED = "not_configured"
UPSTREAM = "upstream"


@dataclass
class ServiceResult:
    """
    Outcome of one call to a third-party API.

    `data` holds the camelCase payload fields of the JSON envelope
    (e.g. {"imageUrl": ...}).
    """
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, **data) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str, kind: str = UPSTREAM) -> "ServiceResult":
        return cls(success=False, error=error, error_kind=kind)

    @property
    def not_configured(self) -> bool:
        return self.error_kind == NOT_CONFIGURED

    def to_envelope(self) -> Dict[str, Any]:
        """The `{success, ...data | error}` JSON body."""
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error}


def is_blank(value: Any) -> bool:
    """True unless `value` is a string with non-whitespace content."""
    return not isinstance(value, str) or not value.strip()


def json_object(response) -> Dict[str, Any]:
    """Decode a JSON response body that must be an object."""
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def first_item(value: Any) -> Dict[str, Any]:
    """First element of a JSON array when it is an object, else {}."""
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}
