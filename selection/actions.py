"""ABOUTME: Selection actions and the validated action request model.

Requests arrive from request-handling code with the action as its wire name
("add", "remove", "add-all", "remove-all", "clear-add"). Anything else is not an
error: it parses to None and the registry treats it as a status query.
"""

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

MAX_NAMESPACE_LENGTH: int = 128
MAX_QUERY_LENGTH: int = 4096


class SelectionAction(str, Enum):
    """Valid selection update actions."""
    ADD = "add"
    REMOVE = "remove"
    ADD_ALL = "add-all"
    REMOVE_ALL = "remove-all"
    CLEAR_AND_ADD = "clear-add"

    @classmethod
    def parse(cls, value: Any) -> Optional["SelectionAction"]:
        """Parse a wire name or enum member, None when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Actions that carry an explicit key list and do nothing without one
KEYED_ACTIONS = frozenset({
    SelectionAction.ADD,
    SelectionAction.REMOVE,
    SelectionAction.CLEAR_AND_ADD,
})


# =============================================================================
# Standalone validators
# =============================================================================

def validate_namespace(namespace: Any) -> Tuple[bool, Optional[str]]:
    """Validate a namespace name and return (is_valid, error_message)."""
    if not isinstance(namespace, str):
        return False, "Namespace must be a string"

    namespace = namespace.strip()
    if not namespace:
        return False, "Namespace cannot be empty"

    if len(namespace) > MAX_NAMESPACE_LENGTH:
        return False, f"Namespace too long (max {MAX_NAMESPACE_LENGTH} characters)"

    return True, None


def is_blank_key(key: Any) -> bool:
    """True for the hollow entries upstream producers sometimes send.

    Keys are opaque, so only None and the empty string count; whitespace is kept.
    """
    return key is None or key == ""


# =============================================================================
# Pydantic models
# =============================================================================

class ActionRequest(BaseModel):
    """A single selection update, as received from a caller."""

    namespace: str = Field(
        ...,
        description="Selection namespace (e.g. 'metadata')",
    )
    action: Optional[SelectionAction] = Field(
        default=None,
        description="Update action; None when the caller asked for the current count only",
    )
    keys: list[Optional[str]] = Field(
        default_factory=list,
        description="Identifiers to add or remove, in caller order",
    )
    query: Optional[str] = Field(
        default=None,
        description="Search query used by add-all",
        max_length=MAX_QUERY_LENGTH,
    )

    @field_validator("namespace")
    @classmethod
    def validate_namespace_field(cls, v: str) -> str:
        is_valid, error = validate_namespace(v)
        if not is_valid:
            raise ValueError(error)
        return v.strip()

    @field_validator("action", mode="before")
    @classmethod
    def parse_action(cls, v: Any) -> Optional[SelectionAction]:
        """Unknown action names become None rather than a validation error."""
        return SelectionAction.parse(v)

    @field_validator("keys", mode="before")
    @classmethod
    def coerce_keys(cls, v: Any) -> list:
        """Accept a single key, None, or any iterable of keys."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [None if k is None else str(k) for k in v]

    @field_validator("query")
    @classmethod
    def normalize_query(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_noop(self) -> bool:
        """True when the request cannot change the selection."""
        if self.action is None:
            return True
        return self.action in KEYED_ACTIONS and not self.keys
