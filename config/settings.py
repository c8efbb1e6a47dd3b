"""Application settings: all configuration loaded from environment variables.

Usage:
    from config.settings import Settings
    settings = Settings()
    settings.validate()   # raises ValueError if NEWS_API_KEY is missing
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class Settings:
    """Centralised application configuration.

    All values are read from environment variables at instantiation time
    so that tests can override them by patching ``os.environ``.
    """

    # ── API Keys ────────────────────────────────────────────────────────────
    news_api_key: str = field(
        default_factory=lambda: os.environ.get("NEWS_API_KEY", "")
    )

    # ── Flask ───────────────────────────────────────────────────────────────
    debug: bool = field(
        default_factory=lambda: os.environ.get("FLASK_DEBUG", "0") == "1"
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "5000"))
    )

    # ── Upstreams ───────────────────────────────────────────────────────────
    #: Seconds to wait on any single outbound request.
    upstream_timeout: float = field(
        default_factory=lambda: float(os.environ.get("UPSTREAM_TIMEOUT", "10"))
    )
    onthisday_url: str = field(
        default_factory=lambda: os.environ.get(
            "ONTHISDAY_URL",
            "https://en.wikipedia.org/api/rest_v1/feed/onthisday/selected/",
        )
    )
    wiki_search_url: str = field(
        default_factory=lambda: os.environ.get(
            "WIKI_SEARCH_URL", "https://en.wikipedia.org/w/api.php"
        )
    )
    countries_url: str = field(
        default_factory=lambda: os.environ.get(
            "COUNTRIES_URL", "https://restcountries.com/v3.1/all?fields=name,cca2"
        )
    )
    news_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "NEWS_API_URL", "https://newsapi.org/v2/everything"
        )
    )

    def validate(self) -> None:
        """Raise ``ValueError`` if any required setting is missing."""
        if not self.news_api_key:
            raise ValueError(
                "NEWS_API_KEY environment variable is not set. "
                "Copy .env.example to .env and add your key."
            )
