"""ABOUTME: Error codes and result values for bulk selection.

Backend failures never propagate out of the registry. Resolvers report them as
ResolveResult values carrying one of the error codes below, and the registry
treats any failed result as an empty selection.
"""

from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# Error Code Constants
# =============================================================================

# Backend errors
ERROR_BACKEND_UNAVAILABLE: str = "backend_unavailable"
ERROR_TIMEOUT: str = "timeout"

# Request errors
ERROR_INVALID_REQUEST: str = "invalid_request"
ERROR_UNSUPPORTED_CAPABILITY: str = "unsupported_capability"

# General errors
ERROR_UNEXPECTED: str = "unexpected_error"


class HTTPStatusCodes:
    """Helper methods for HTTP status code checks."""

    @staticmethod
    def is_rate_limit(status_code: int) -> bool:
        return status_code == 429

    @staticmethod
    def is_client_error(status_code: int) -> bool:
        return 400 <= status_code < 500

    @staticmethod
    def is_server_error(status_code: int) -> bool:
        return 500 <= status_code < 600


def interpret_http_error(status_code: int) -> str:
    """Map an index service HTTP status code to a resolver error code."""
    if HTTPStatusCodes.is_server_error(status_code) or HTTPStatusCodes.is_rate_limit(status_code):
        return ERROR_BACKEND_UNAVAILABLE
    elif HTTPStatusCodes.is_client_error(status_code):
        return ERROR_INVALID_REQUEST
    else:
        return ERROR_UNEXPECTED


@dataclass
class ResolveResult:
    """Outcome of resolving select-all into concrete UUIDs.

    Attributes:
        uuids: Resolved identifiers in backend order (empty on failure)
        error_code: One of the ERROR_* constants, None on success
        error_message: Human-readable failure description (optional)
        metadata: Resolver-specific details (backend name, source of the query)
    """
    uuids: list[str] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_code is None

    @classmethod
    def success(cls, uuids: list[str], **metadata) -> "ResolveResult":
        return cls(uuids=list(uuids), metadata=metadata)

    @classmethod
    def failure(cls, error_code: str, error_message: str, **metadata) -> "ResolveResult":
        return cls(error_code=error_code, error_message=error_message, metadata=metadata)

    @classmethod
    def empty(cls, **metadata) -> "ResolveResult":
        """Successful resolution that selected nothing."""
        return cls(metadata=metadata)

    def limited(self, max_hits: int) -> list[str]:
        """UUIDs to install, truncated at max_hits. Failures install nothing."""
        if not self.ok:
            return []
        return self.uuids[:max_hits]
