"""ABOUTME: Runs select-all resolution off the caller's locks, under a timeout.

The resolver may block on a network or search call. Each resolution gets its
own daemon thread, so a stalled backend costs its caller at most the configured
timeout and never holds up select-all in other sessions.
"""

import logging
import threading
from typing import Optional

from .errors import ERROR_TIMEOUT, ERROR_UNEXPECTED, ERROR_UNSUPPORTED_CAPABILITY, ResolveResult
from .search.backend import BulkUuidResolver, SearchContext

logger = logging.getLogger(__name__)


class _Resolution:
    """One resolver call running on its own thread."""

    def __init__(self, resolver: BulkUuidResolver, context: SearchContext, max_hits: int):
        self.resolver = resolver
        self.context = context
        self.max_hits = max_hits
        self.result: Optional[ResolveResult] = None
        self.error: Optional[Exception] = None
        self.thread = threading.Thread(
            target=self._run, name=f"selection-bulk-{resolver.name}", daemon=True
        )

    def _run(self) -> None:
        try:
            self.result = self.resolver.resolve(self.context, self.max_hits)
        except Exception as e:
            logger.error(f"Select-all on {self.resolver.name} raised: {e}", exc_info=True)
            self.error = e

    def wait(self, timeout: Optional[float]) -> bool:
        """Start the call and wait for it. Returns False if it is still running."""
        self.thread.start()
        self.thread.join(timeout)
        return not self.thread.is_alive()


def resolve_select_all(
    resolver: Optional[BulkUuidResolver],
    context: SearchContext,
    max_hits: int,
    timeout: Optional[float] = None,
) -> ResolveResult:
    """Resolve select-all, converting every failure mode into a result value.

    Args:
        resolver: Active backend, None when no backend is configured
        context: Session and optional explicit query
        max_hits: Upper bound on returned UUIDs
        timeout: Seconds to wait for the backend; None waits indefinitely

    Returns:
        ResolveResult; on success its UUIDs are already truncated to max_hits
    """
    if resolver is None:
        logger.warning("Select-all requested but no backend is configured")
        return ResolveResult.failure(ERROR_UNSUPPORTED_CAPABILITY, "No select-all backend configured")

    resolution = _Resolution(resolver, context, max_hits)
    if not resolution.wait(timeout):
        # the thread is left to finish on its own; its result is discarded
        logger.error(f"Select-all on {resolver.name} timed out after {timeout}s")
        return ResolveResult.failure(ERROR_TIMEOUT, f"Backend did not answer within {timeout}s", backend=resolver.name)

    if resolution.error is not None:
        return ResolveResult.failure(ERROR_UNEXPECTED, str(resolution.error), backend=resolver.name)

    result = resolution.result
    if result is None:
        return ResolveResult.failure(ERROR_UNEXPECTED, "Resolver returned no result", backend=resolver.name)

    if not result.ok:
        logger.warning(f"Select-all on {resolver.name} failed ({result.error_code}): {result.error_message}")
        return result

    if len(result.uuids) > max_hits:
        logger.info(f"Select-all truncated from {len(result.uuids)} to {max_hits} UUIDs")
        result.uuids = result.uuids[:max_hits]

    return result
