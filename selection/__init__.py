"""ABOUTME: Per-session selection registry with search-backed select-all."""

from .actions import ActionRequest, SelectionAction
from .annotate import AnnotatedBatch
from .config import DEFAULT_MAX_HITS, SelectionSettings, parse_max_hits
from .errors import ResolveResult
from .namespace import Selection
from .registry import (
    SELECTION_METADATA,
    SelectionContext,
    SelectionRegistry,
    update_result,
    update_selection,
)
from .session import InMemorySession, SessionStore

__all__ = [
    "ActionRequest",
    "SelectionAction",
    "AnnotatedBatch",
    "DEFAULT_MAX_HITS",
    "SelectionSettings",
    "parse_max_hits",
    "ResolveResult",
    "Selection",
    "SELECTION_METADATA",
    "SelectionContext",
    "SelectionRegistry",
    "update_result",
    "update_selection",
    "InMemorySession",
    "SessionStore",
]
