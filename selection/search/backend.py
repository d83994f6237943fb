"""ABOUTME: Abstract interfaces for resolving select-all against a search backend.

Defines the BulkUuidResolver interface that every backend variant implements,
the SearchContext handed to it, and the contracts of the legacy search manager
the re-run-last-query resolver drives.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import ResolveResult

# Request parameter carrying the free-text query
QUERY_PARAM = "any"

# Request parameter controlling summary (facet) computation
BUILD_SUMMARY_PARAM = "build_summary"


@dataclass
class SearchContext:
    """What a resolver may use to work out "everything matching".

    Attributes:
        session: Session store of the calling user (see selection.session)
        query: Query supplied with the add-all request, if any
    """
    session: Any
    query: Optional[str] = None


class BulkUuidResolver(ABC):
    """Resolves "select all matching" into a bounded list of UUIDs.

    Implementations must not raise for backend problems. Failures are reported
    as ResolveResult.failure so the registry can degrade to an empty selection.
    """

    @abstractmethod
    def resolve(self, context: SearchContext, max_hits: int) -> ResolveResult:
        """Resolve the current search context into UUIDs.

        Args:
            context: Session and optional explicit query
            max_hits: Upper bound on the number of UUIDs returned

        Returns:
            ResolveResult with at most max_hits UUIDs in backend order
        """
        pass

    def close(self) -> None:
        """Release backend connections. Default does nothing."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'last-query', 'direct-query')."""
        pass


class Searcher(ABC):
    """A single search execution in the legacy search engine."""

    @abstractmethod
    def search(self, request: dict) -> None:
        """Run the request; results are kept on the searcher."""
        pass


class UuidSelector(ABC):
    """Capability of searchers able to list every matching UUID."""

    @abstractmethod
    def get_all_uuids(self, max_hits: int) -> list[str]:
        pass


class LegacySearchManager(ABC):
    """Single-process search engine handing out searchers."""

    @abstractmethod
    def new_searcher(self) -> Searcher:
        pass
