"""
Runtime settings for live-stream discovery.

Settings are an explicit value handed to the pipeline by its caller, so
separate runs (and tests) never share mutable state.

Environment variables (all optional):
    LIVESCOUT_QUERY_TIMEOUT      per-query timeout in seconds (default 15)
    LIVESCOUT_MAX_RESULTS        cap on returned streams (default 50)
    LIVESCOUT_ACCEPT_LANGUAGE    Accept-Language header
    LIVESCOUT_USER_AGENT         User-Agent header
    LIVESCOUT_DEFAULT_CATEGORY   category ranked first (default excel-live)
    LIVESCOUT_RULES_PATH         JSON file with category rules
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .discovery.categories import DEFAULT_CATEGORY_ID

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    query_timeout: float = 15.0      # seconds
    max_results: int = 50
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    user_agent: str = DEFAULT_USER_AGENT
    default_category_id: str = DEFAULT_CATEGORY_ID
    rules_path: Optional[str] = None

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from LIVESCOUT_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def number(key: str, default, cast):
            raw = env.get(key)
            if not raw:
                return default
            try:
                return cast(raw)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", key, raw)
                return default

        return cls(
            query_timeout=number("LIVESCOUT_QUERY_TIMEOUT", defaults.query_timeout, float),
            max_results=number("LIVESCOUT_MAX_RESULTS", defaults.max_results, int),
            accept_language=env.get("LIVESCOUT_ACCEPT_LANGUAGE") or defaults.accept_language,
            user_agent=env.get("LIVESCOUT_USER_AGENT") or defaults.user_agent,
            default_category_id=env.get("LIVESCOUT_DEFAULT_CATEGORY") or defaults.default_category_id,
            rules_path=env.get("LIVESCOUT_RULES_PATH") or None,
        )
