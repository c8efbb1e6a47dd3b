"""
Pydantic models shared across the History Lookup core.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

WIKI_ARTICLE_BASE = "https://en.wikipedia.org/wiki/"


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class EventPage(BaseModel):
    """A Wikipedia page linked from an on-this-day event."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: Optional[str] = None


class HistoricalEvent(BaseModel):
    """A single dated event from the on-this-day feed.

    ``year`` is kept exactly as the feed delivered it, whatever its type; the
    filters parse it on demand so that malformed values are dropped from
    bucketed results rather than rejected at load time.
    """

    model_config = ConfigDict(frozen=True)

    year: Any = None
    text: str = ""
    pages: tuple[EventPage, ...] = ()

    @property
    def article_url(self) -> Optional[str]:
        """URL of the first linked page, if it has one."""
        if not self.pages:
            return None
        return self.pages[0].url

    @classmethod
    def from_feed(cls, item: dict[str, Any]) -> HistoricalEvent:
        """Build an event from one raw item of the feed's ``selected`` array.

        Pages that are not objects, and page fields of the wrong type, are
        ignored. A non-string ``text`` still fails validation.
        """
        pages = []
        raw_pages = item.get("pages")
        for page in raw_pages if isinstance(raw_pages, list) else []:
            if not isinstance(page, dict):
                continue
            desktop = _mapping(_mapping(page.get("content_urls")).get("desktop"))
            title = page.get("title")
            url = desktop.get("page")
            pages.append(EventPage(
                title=title if isinstance(title, str) else "",
                url=url if isinstance(url, str) else None,
            ))
        return cls(
            year=item.get("year"),
            text=item.get("text") or "",
            pages=tuple(pages),
        )


class SearchHit(BaseModel):
    """One result from the Wikipedia full-text search."""

    title: str
    snippet: str = ""

    @property
    def url(self) -> str:
        return WIKI_ARTICLE_BASE + quote(self.title.replace(" ", "_"))


class Country(BaseModel):
    """A country as listed by the countries endpoint."""

    name: str
    code: str
