"""ABOUTME: Select-all resolver that re-runs the last search on the legacy engine.

The request-handling layer stores the last search request (and sometimes the
searcher that ran it) in the session. Resolution order:

1. Explicit query supplied with the add-all request
2. Clone of the stored last search request, re-run on a fresh searcher
3. Searcher cached in the session by the previous search
4. Nothing to re-run: resolves to an empty selection
"""

import copy
import logging
from typing import Optional

from ..errors import (
    ERROR_INVALID_REQUEST,
    ERROR_UNEXPECTED,
    ERROR_UNSUPPORTED_CAPABILITY,
    ResolveResult,
)
from ..session import SEARCH_REQUEST, SEARCH_RESULT
from .backend import (
    BUILD_SUMMARY_PARAM,
    QUERY_PARAM,
    BulkUuidResolver,
    LegacySearchManager,
    SearchContext,
    UuidSelector,
)

logger = logging.getLogger(__name__)


class LastQueryResolver(BulkUuidResolver):
    """Legacy single-searcher backend implementation."""

    def __init__(self, search_manager: LegacySearchManager):
        self.search_manager = search_manager
        logger.info("LastQueryResolver initialized")

    @property
    def name(self) -> str:
        return "last-query"

    def resolve(self, context: SearchContext, max_hits: int) -> ResolveResult:
        request, source = self._pick_request(context)

        if source == "stored-request" and request is None:
            return ResolveResult.failure(
                ERROR_INVALID_REQUEST,
                "Stored search request is not a parameter mapping",
                backend=self.name,
                source=source,
            )

        if request is not None:
            try:
                searcher = self.search_manager.new_searcher()
                searcher.search(request)
            except (TypeError, ValueError, KeyError) as e:
                logger.warning(f"Malformed {source} search request: {e}")
                return ResolveResult.failure(ERROR_INVALID_REQUEST, str(e), backend=self.name, source=source)
            except Exception as e:
                logger.error(f"Re-running {source} search failed: {e}", exc_info=True)
                return ResolveResult.failure(ERROR_UNEXPECTED, str(e), backend=self.name, source=source)
        else:
            searcher = context.session.get_property(SEARCH_RESULT)
            source = "cached-searcher"
            if searcher is None:
                logger.info("No search to re-run for select-all, selecting nothing")
                return ResolveResult.empty(backend=self.name, source="none")

        if not isinstance(searcher, UuidSelector):
            logger.warning(f"Searcher {type(searcher).__name__} cannot list UUIDs")
            return ResolveResult.failure(
                ERROR_UNSUPPORTED_CAPABILITY,
                f"{type(searcher).__name__} does not support listing all UUIDs",
                backend=self.name,
                source=source,
            )

        try:
            uuids = list(searcher.get_all_uuids(max_hits))
        except Exception as e:
            logger.error(f"Listing UUIDs from {source} failed: {e}", exc_info=True)
            return ResolveResult.failure(ERROR_UNEXPECTED, str(e), backend=self.name, source=source)

        logger.info(f"Select-all resolved {len(uuids)} UUIDs from {source}")
        return ResolveResult.success(uuids[:max_hits], backend=self.name, source=source)

    def _pick_request(self, context: SearchContext) -> tuple[Optional[dict], Optional[str]]:
        """Return (request, source) to run, or (None, None) to fall back to the cached searcher.

        A stored request that is not a mapping comes back as (None, "stored-request").
        """
        if context.query:
            return build_request(context.query), "explicit-query"

        stored = context.session.get_property(SEARCH_REQUEST)
        if stored is None:
            return None, None

        if not isinstance(stored, dict):
            logger.warning(f"Stored search request has unexpected type {type(stored).__name__}")
            return None, "stored-request"

        request = copy.deepcopy(stored)
        request[BUILD_SUMMARY_PARAM] = "false"
        return request, "stored-request"


def build_request(query: str) -> dict:
    """Build a legacy search request for a free-text query, without summary."""
    return {QUERY_PARAM: query, BUILD_SUMMARY_PARAM: "false"}
