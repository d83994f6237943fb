"""ABOUTME: Select-all resolver that queries the distributed index directly.

Sends the query to the index service's select endpoint asking only for the
uuid field, with rows capped at max_hits. When the add-all request carries no
query, the free-text part of the last stored search request is used instead.
"""

import logging
from typing import Optional

import httpx

from ..errors import (
    ERROR_BACKEND_UNAVAILABLE,
    ERROR_TIMEOUT,
    ERROR_UNEXPECTED,
    ResolveResult,
    interpret_http_error,
)
from ..session import SEARCH_REQUEST
from .backend import QUERY_PARAM, BulkUuidResolver, SearchContext

logger = logging.getLogger(__name__)

DEFAULT_INDEX_TIMEOUT = 10.0
UUID_FIELD = "uuid"


class IndexClient:
    """Minimal client for the index service select endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_INDEX_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize index client.

        Args:
            base_url: Collection URL (e.g., http://localhost:8983/solr/catalog)
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def get_docs_uuids(self, query: str, limit: int) -> list[str]:
        """Return up to limit UUIDs of documents matching query.

        Raises:
            httpx.HTTPStatusError: If the index returns an error status
            httpx.TimeoutException: If the request times out
            ValueError: If the response body is not the expected JSON
        """
        params = {
            "q": query,
            "fl": UUID_FIELD,
            "rows": limit,
            "wt": "json",
        }
        response = self.client.get("/select", params=params)
        response.raise_for_status()
        data = response.json()

        docs = data.get("response", {}).get("docs", [])
        uuids = []
        for doc in docs:
            value = doc.get(UUID_FIELD)
            # multi-valued fields come back as lists
            if isinstance(value, list):
                value = value[0] if value else None
            if value:
                uuids.append(value)
        return uuids[:limit]

    def close(self) -> None:
        self.client.close()


class DirectQueryResolver(BulkUuidResolver):
    """Distributed index backend implementation."""

    def __init__(self, index_client: IndexClient):
        self.index_client = index_client
        logger.info("DirectQueryResolver initialized")

    @property
    def name(self) -> str:
        return "direct-query"

    def resolve(self, context: SearchContext, max_hits: int) -> ResolveResult:
        query, source = self._pick_query(context)
        if query is None:
            logger.info("No query for select-all, selecting nothing")
            return ResolveResult.empty(backend=self.name, source="none")

        logger.info(f"Index select-all: '{query}' (max_hits={max_hits})")

        try:
            uuids = self.index_client.get_docs_uuids(query, max_hits)

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Index HTTP error {status} for select-all")
            return ResolveResult.failure(
                interpret_http_error(status), f"HTTP Error {status}", backend=self.name, source=source
            )

        except httpx.TimeoutException:
            logger.error("Index request timeout during select-all")
            return ResolveResult.failure(ERROR_TIMEOUT, "Index request timed out", backend=self.name, source=source)

        except httpx.RequestError as e:
            logger.error(f"Index unreachable: {e}")
            return ResolveResult.failure(ERROR_BACKEND_UNAVAILABLE, str(e), backend=self.name, source=source)

        except Exception as e:
            logger.error(f"Unexpected error during index select-all: {e}", exc_info=True)
            return ResolveResult.failure(ERROR_UNEXPECTED, str(e), backend=self.name, source=source)

        logger.info(f"Index select-all returned {len(uuids)} UUIDs")
        return ResolveResult.success(uuids[:max_hits], backend=self.name, source=source)

    def close(self) -> None:
        self.index_client.close()

    @staticmethod
    def _pick_query(context: SearchContext) -> tuple[Optional[str], Optional[str]]:
        if context.query:
            return context.query, "explicit-query"

        stored = context.session.get_property(SEARCH_REQUEST)
        if isinstance(stored, dict):
            text = stored.get(QUERY_PARAM)
            if isinstance(text, str) and text.strip():
                return text.strip(), "stored-request"

        return None, None
