"""ABOUTME: Per-session registry of selected keys across named namespaces.

One registry lives in each user session under the SELECTED_RESULT property. It
maps namespace names to internally synchronized Selection sets and applies the
five update actions:

- add: add the given keys
- remove: remove the given keys
- clear-add: clear the namespace, then add the given keys, in one locked step
- add-all: replace the namespace with every UUID the search backend matches
- remove-all: clear the namespace

Any other action, and add/remove/clear-add without keys, leaves the selection
as it is and just reports its size.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from .actions import KEYED_ACTIONS, ActionRequest, SelectionAction, is_blank_key
from .annotate import AnnotatedBatch, annotate_items
from .bulk import resolve_select_all
from .config import SelectionSettings
from .namespace import Selection
from .search.backend import BulkUuidResolver, SearchContext
from .session import SELECTED_RESULT, SessionStore

logger = logging.getLogger(__name__)

SELECTION_METADATA = "metadata"

# Request parameter names used by update_selection
PARAM_ID = "id"
PARAM_SELECTED = "selected"
PARAM_QUERY = "q"


@dataclass
class SelectionContext:
    """Collaborators a selection update may need, passed in explicitly.

    Attributes:
        session: Session store holding the registry
        resolver: Active select-all backend (None disables add-all)
        settings: Selection settings (max records, timeout)
    """
    session: SessionStore
    resolver: Optional[BulkUuidResolver] = None
    settings: SelectionSettings = field(default_factory=SelectionSettings)

    @property
    def registry(self) -> "SelectionRegistry":
        return SelectionRegistry.get_or_create(self.session)


class SelectionRegistry:
    """Selected keys of one user session, grouped by namespace."""

    def __init__(self):
        self._lock = threading.Lock()
        self._namespaces: dict[str, Selection] = {SELECTION_METADATA: Selection()}

    def __repr__(self) -> str:
        with self._lock:
            sizes = {name: len(sel) for name, sel in self._namespaces.items()}
        return f"SelectionRegistry({sizes})"

    @classmethod
    def get_or_create(cls, session: SessionStore) -> "SelectionRegistry":
        """Return the session's registry, creating it on first access.

        Concurrent first accesses all get the same instance: the session's
        set-if-absent decides the winner and losing instances are dropped.
        """
        registry = session.get_property(SELECTED_RESULT)
        if registry is not None:
            return registry

        candidate = cls()
        registry = session.set_property_if_absent(SELECTED_RESULT, candidate)
        if registry is candidate:
            logger.debug(f"Created selection registry for {session!r}")
        return registry

    def namespace(self, name: str) -> Selection:
        """The namespace's Selection, created empty on first reference."""
        with self._lock:
            selection = self._namespaces.get(name)
            if selection is None:
                selection = Selection()
                self._namespaces[name] = selection
            return selection

    @property
    def namespaces(self) -> list[str]:
        with self._lock:
            return list(self._namespaces)

    # =========================================================================
    # Updates
    # =========================================================================

    def apply_action(
        self,
        namespace: str,
        action: Any,
        keys: Sequence[Optional[str]] = (),
        query: Optional[str] = None,
        context: Optional[SelectionContext] = None,
    ) -> int:
        """Apply one update action to a namespace.

        Args:
            namespace: Namespace to update
            action: SelectionAction or its wire name; anything else is a no-op
            keys: Keys for add, remove and clear-add
            query: Query for add-all
            context: Collaborators for add-all (session, resolver, settings)

        Returns:
            Number of selected keys in the namespace afterwards
        """
        selection = self.namespace(namespace)
        parsed = SelectionAction.parse(action)
        if isinstance(keys, str):
            keys = [keys]
        keys = list(keys or ())

        if parsed is None or (parsed in KEYED_ACTIONS and not keys):
            return len(selection)

        if parsed == SelectionAction.ADD_ALL:
            return self._select_all(namespace, selection, query, context)

        with selection.lock:
            if parsed == SelectionAction.ADD:
                selection.update(keys)
            elif parsed == SelectionAction.REMOVE:
                selection.discard_all(keys)
            elif parsed == SelectionAction.CLEAR_AND_ADD:
                selection.replace(keys)
            elif parsed == SelectionAction.REMOVE_ALL:
                selection.clear()
            size = selection.purge_blank()

        logger.debug(f"Selection {parsed.value} on '{namespace}': {size} selected")
        return size

    def apply(self, request: ActionRequest, context: Optional[SelectionContext] = None) -> int:
        """Apply a validated ActionRequest."""
        return self.apply_action(request.namespace, request.action, request.keys, request.query, context)

    def _select_all(
        self,
        namespace: str,
        selection: Selection,
        query: Optional[str],
        context: Optional[SelectionContext],
    ) -> int:
        # Resolution runs with no lock held; the namespace keeps its old
        # content until the result is installed.
        settings = context.settings if context is not None else SelectionSettings()
        max_hits = settings.max_hits()
        result = resolve_select_all(
            context.resolver if context is not None else None,
            SearchContext(session=context.session if context is not None else None, query=query),
            max_hits,
            timeout=settings.selection_search_timeout,
        )

        uuids = result.limited(max_hits)
        with selection.lock:
            selection.replace(uuids)
            size = selection.purge_blank()

        logger.info(f"Select-all on '{namespace}': {size} selected (max_hits={max_hits})")
        return size

    def add_selection(self, namespace: str, key: str) -> bool:
        """Add a single key. Returns True if it was not already selected."""
        if is_blank_key(key):
            return False
        return self.namespace(namespace).add(key)

    def add_all_selection(self, namespace: str, keys: Iterable[Optional[str]]) -> bool:
        """Add many keys. Returns True if the selection changed."""
        selection = self.namespace(namespace)
        with selection.lock:
            before = len(selection)
            selection.update(keys)
            return selection.purge_blank() != before

    def clear(self, namespace: str) -> None:
        """Clear one namespace, leaving the others alone."""
        self.namespace(namespace).clear()

    def clear_all(self) -> None:
        with self._lock:
            selections = list(self._namespaces.values())
        for selection in selections:
            selection.clear()

    close = clear
    close_all = clear_all

    # =========================================================================
    # Reads
    # =========================================================================

    def get_selection(self, namespace: str) -> frozenset[str]:
        """Snapshot of the namespace's keys.

        The returned frozenset is a copy: later updates do not show up in it
        and it cannot be used to mutate the registry.
        """
        return self.namespace(namespace).snapshot()

    def size(self, namespace: str) -> int:
        return len(self.namespace(namespace))

    def is_selected(self, namespace: str, key: str) -> bool:
        return key in self.namespace(namespace)

    def mark_selected(self, items: Sequence[Mapping[str, Any]]) -> AnnotatedBatch:
        """Flag each item whose identifier is in the metadata selection."""
        return annotate_items(items, self.get_selection(SELECTION_METADATA))


# =============================================================================
# Request-level entry points
# =============================================================================

def update_selection(
    namespace: str,
    params: Mapping[str, Any],
    context: SelectionContext,
) -> int:
    """Apply an update described by raw request parameters.

    Args:
        namespace: Namespace to update
        params: Request parameters: "id" (one key or a list), "selected"
                (action wire name) and optionally "q" (add-all query)
        context: Session, resolver and settings of the calling request

    Returns:
        Number of selected keys in the namespace afterwards

    Raises:
        pydantic.ValidationError: If the namespace is empty or too long
    """
    request = ActionRequest(
        namespace=namespace,
        action=params.get(PARAM_SELECTED),
        keys=params.get(PARAM_ID),
        query=params.get(PARAM_QUERY),
    )
    return context.registry.apply(request, context)


def update_result(session: SessionStore, items: Sequence[Mapping[str, Any]]) -> AnnotatedBatch:
    """Annotate a page of search results with the session's metadata selection."""
    return SelectionRegistry.get_or_create(session).mark_selected(items)
