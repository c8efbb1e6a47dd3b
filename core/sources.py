"""Read-only upstream clients.

One small class per external collaborator, each with a single method:

- ``OnThisDayClient.fetch_events``    Wikipedia "On this day" selected feed
- ``WikiSearchClient.search``         Wikipedia full-text search
- ``CountriesClient.list_countries``  REST Countries name/code list

Sessions are lazy-initialised (or injected) so tests can substitute a mock.
Any transport, HTTP-status or decoding failure is raised as ``UpstreamError``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from core.models import Country, HistoricalEvent, SearchHit

logger = logging.getLogger(__name__)

ONTHISDAY_URL = "https://en.wikipedia.org/api/rest_v1/feed/onthisday/selected/"
WIKI_SEARCH_URL = "https://en.wikipedia.org/w/api.php"
COUNTRIES_URL = "https://restcountries.com/v3.1/all?fields=name,cca2"


class UpstreamError(Exception):
    """An external service could not be reached or returned unusable data."""


class _JsonClient:
    """Shared plumbing: lazy session, timeout and JSON decoding."""

    #: Name used in log lines and error messages.
    service = "upstream"

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.exception("Error fetching %s data from %s", self.service, url)
            raise UpstreamError(f"Error accessing {self.service} data.") from exc


class OnThisDayClient(_JsonClient):
    """Fetches the selected historical events for a calendar day."""

    service = "Wikipedia"

    def __init__(self, url: str = ONTHISDAY_URL, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)

    def fetch_events(self, month: str, day: str) -> list[HistoricalEvent]:
        """Return the feed's ``selected`` events for *month*/*day*.

        Args:
            month: Two-digit month, e.g. ``"07"``.
            day: Two-digit day, e.g. ``"20"``.
        """
        url = f"{self.url.rstrip('/')}/{month}/{day}"
        data = self._get_json(url)
        if not isinstance(data, dict):
            raise UpstreamError("Error accessing Wikipedia data.")

        selected = data.get("selected")
        events: list[HistoricalEvent] = []
        for item in selected if isinstance(selected, list) else []:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object feed item: %.60r", item)
                continue
            try:
                events.append(HistoricalEvent.from_feed(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed feed item %.60r: %s", item, exc)
        logger.info("Fetched %d events for %s/%s", len(events), month, day)
        return events


class WikiSearchClient(_JsonClient):
    """Free-text topic search against Wikipedia."""

    service = "Wikipedia search"

    def __init__(self, url: str = WIKI_SEARCH_URL, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)

    def search(self, query: str) -> list[SearchHit]:
        """Return Wikipedia search hits for *query*.

        Raises:
            ValueError: If the query is blank.
            UpstreamError: On transport or decoding failures.
        """
        query = query.strip()
        if not query:
            raise ValueError("Search query must not be empty.")

        params = {
            "action": "query",
            "list": "search",
            "format": "json",
            "srsearch": query,
        }
        data = self._get_json(self.url, params=params)
        if not isinstance(data, dict):
            raise UpstreamError("Error accessing Wikipedia search data.")
        raw = (data.get("query") or {}).get("search") or []

        hits = [
            SearchHit(title=item.get("title") or "", snippet=item.get("snippet") or "")
            for item in raw
            if isinstance(item, dict) and item.get("title")
        ]
        logger.info("Wikipedia search query=%r: %d hits", query, len(hits))
        return hits


class CountriesClient(_JsonClient):
    """Lists countries by common name and ISO alpha-2 code."""

    service = "countries"

    def __init__(self, url: str = COUNTRIES_URL, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)

    def list_countries(self) -> list[Country]:
        """Return all countries sorted by common name."""
        data = self._get_json(self.url)
        if not isinstance(data, list):
            raise UpstreamError("Error accessing countries data.")

        countries: list[Country] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            name = (item.get("name") or {}).get("common")
            code = item.get("cca2")
            if name and code:
                countries.append(Country(name=name, code=code))

        countries.sort(key=lambda c: c.name.casefold())
        return countries
