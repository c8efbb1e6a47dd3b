"""News search proxy.

Holds the NewsAPI key on the server and relays a caller's search phrase to
the NewsAPI ``everything`` endpoint. Every outcome is returned as a
``GatewayResponse`` with a JSON-ready body; nothing is raised to the caller.

Outcomes
────────
500  missing credential          {"error": "Configuration Error: ..."}
400  missing / blank query       {"error": "No search query provided."}
500  NewsAPI error envelope      {"error": "NewsAPI Error: <message>"}
500  network, JSON or shape error {"error": "Failed to connect to NewsAPI."}
200  success                     {"articles": [...]}   (passed through as-is)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

NEWS_API_URL = "https://newsapi.org/v2/everything"

#: Fixed request shape: English only, five newest articles.
NEWS_LANGUAGE = "en"
NEWS_PAGE_SIZE = 5
NEWS_SORT_BY = "publishedAt"
API_KEY_HEADER = "X-Api-Key"

MISSING_KEY_MESSAGE = "Configuration Error: NEWS_API_KEY is missing."
MISSING_QUERY_MESSAGE = "No search query provided."
CONNECT_FAILED_MESSAGE = "Failed to connect to NewsAPI."


@dataclass
class GatewayResponse:
    """HTTP status plus JSON body produced by the gateway."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == 200


def extract_query(body: object) -> Optional[str]:
    """Return the stripped ``query`` from a request body, or None if unusable."""
    if not isinstance(body, dict):
        return None
    query = body.get("query")
    if not isinstance(query, str):
        return None
    query = query.strip()
    return query or None


class NewsGateway:
    """Relays news searches to NewsAPI using a server-held key.

    The key and HTTP session are injected so the gateway can be exercised
    without a real environment or network.
    """

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        url: str = NEWS_API_URL,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Lazy-initialise and return the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def build_params(self, query: str) -> dict[str, Any]:
        """Query-string parameters for a NewsAPI ``everything`` search."""
        return {
            "q": query,
            "language": NEWS_LANGUAGE,
            "pageSize": NEWS_PAGE_SIZE,
            "sortBy": NEWS_SORT_BY,
        }

    def build_headers(self) -> dict[str, str]:
        """Request headers; the key travels here so it never appears in a URL."""
        return {API_KEY_HEADER: self.api_key or ""}

    def handle(self, body: object) -> GatewayResponse:
        """Validate *body*, call NewsAPI once and shape the result.

        Args:
            body: The decoded JSON request body; expected ``{"query": str}``.

        Returns:
            A ``GatewayResponse``; see the module docstring for the outcomes.
        """
        if not self.api_key:
            logger.error("News search rejected: NEWS_API_KEY is not configured")
            return GatewayResponse(500, {"error": MISSING_KEY_MESSAGE})

        query = extract_query(body)
        if query is None:
            return GatewayResponse(400, {"error": MISSING_QUERY_MESSAGE})

        logger.info("News search query=%r", query)
        try:
            response = self.session.get(
                self.url,
                params=self.build_params(query),
                headers=self.build_headers(),
                timeout=self.timeout,
            )
            data = response.json()
        except (requests.RequestException, ValueError):
            logger.exception("External News API error for query=%r", query)
            return GatewayResponse(500, {"error": CONNECT_FAILED_MESSAGE})

        if not isinstance(data, dict):
            logger.error("Unexpected NewsAPI payload type: %s", type(data).__name__)
            return GatewayResponse(500, {"error": CONNECT_FAILED_MESSAGE})

        if data.get("status") == "error":
            message = data.get("message") or "unknown error"
            logger.warning("NewsAPI returned an error for query=%r: %s", query, message)
            return GatewayResponse(500, {"error": f"NewsAPI Error: {message}"})

        articles = data.get("articles")
        if articles is None:
            articles = []
        if not isinstance(articles, list):
            logger.error("Unexpected NewsAPI articles type: %s", type(articles).__name__)
            return GatewayResponse(500, {"error": CONNECT_FAILED_MESSAGE})
        logger.info("News search complete: %d articles", len(articles))
        return GatewayResponse(200, {"articles": articles})
