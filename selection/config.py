"""ABOUTME: Selection settings loaded from the environment.

Settings follow the same BaseSettings pattern used by the other clients in this
project: plain defaults, overridable through environment variables or a .env file.
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Used to limit select-all when the max records setting is missing or unparseable
DEFAULT_MAX_HITS: int = 1000

DEFAULT_SEARCH_TIMEOUT: float = 30.0


class SelectionSettings(BaseSettings):
    """Selection configuration from environment."""

    selection_max_records: Optional[str] = None
    selection_backend: str = "last-query"
    selection_search_timeout: float = DEFAULT_SEARCH_TIMEOUT
    index_url: str = "http://localhost:8983/solr/catalog"
    index_timeout: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def get_selection_max_records(self) -> Optional[str]:
        """Raw max records setting, as the settings provider stores it."""
        return self.selection_max_records

    def max_hits(self) -> int:
        """Parsed select-all bound, falling back to DEFAULT_MAX_HITS."""
        return parse_max_hits(self.get_selection_max_records())


def parse_max_hits(raw: Optional[str], default: int = DEFAULT_MAX_HITS) -> int:
    """Parse the max records setting, falling back on unusable values.

    Args:
        raw: Setting value as stored (may be None, blank or garbage)
        default: Bound to use when the value cannot be used

    Returns:
        A positive integer bound
    """
    if raw is None or not str(raw).strip():
        return default

    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.warning(f"Unparseable selection max records '{raw}', using {default}")
        return default

    if value <= 0:
        logger.warning(f"Non-positive selection max records {value}, using {default}")
        return default

    return value
