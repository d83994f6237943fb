"""ABOUTME: Factory for instantiating the configured select-all resolver.

The active backend is chosen once, at construction time, so the registry only
ever sees the BulkUuidResolver interface.
"""

import logging
from typing import Optional

from ..config import SelectionSettings
from .backend import BulkUuidResolver, LegacySearchManager
from .direct_query import DirectQueryResolver, IndexClient
from .last_query import LastQueryResolver

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("last-query", "direct-query")


def get_bulk_resolver(
    backend_type: Optional[str] = None,
    settings: Optional[SelectionSettings] = None,
    search_manager: Optional[LegacySearchManager] = None,
    index_client: Optional[IndexClient] = None,
) -> BulkUuidResolver:
    """Create and return a select-all resolver.

    Args:
        backend_type: "last-query" or "direct-query". If None, read from
                      settings (SELECTION_BACKEND environment variable).
        settings: Selection settings; loaded from the environment if None
        search_manager: Legacy search manager, required for "last-query"
        index_client: Index client for "direct-query"; built from settings if None

    Returns:
        BulkUuidResolver instance

    Raises:
        ValueError: If backend_type is unknown or a required collaborator is missing
    """
    if settings is None:
        settings = SelectionSettings()

    if backend_type is None:
        backend_type = settings.selection_backend
    backend_type = backend_type.strip().lower()

    logger.info(f"Creating select-all resolver: {backend_type}")

    if backend_type == "last-query":
        if search_manager is None:
            raise ValueError("last-query resolver requires a legacy search manager")
        return LastQueryResolver(search_manager)

    if backend_type == "direct-query":
        if index_client is None:
            index_client = IndexClient(settings.index_url, timeout=settings.index_timeout)
        return DirectQueryResolver(index_client)

    raise ValueError(
        f"Unknown select-all backend: {backend_type}. Supported: {', '.join(SUPPORTED_BACKENDS)}"
    )
