"""ABOUTME: Select-all backend infrastructure - interfaces, implementations, and factory."""

from .backend import (
    BulkUuidResolver,
    LegacySearchManager,
    SearchContext,
    Searcher,
    UuidSelector,
)
from .direct_query import DirectQueryResolver, IndexClient
from .factory import get_bulk_resolver
from .last_query import LastQueryResolver

__all__ = [
    "BulkUuidResolver",
    "LegacySearchManager",
    "SearchContext",
    "Searcher",
    "UuidSelector",
    "DirectQueryResolver",
    "IndexClient",
    "LastQueryResolver",
    "get_bulk_resolver",
]
