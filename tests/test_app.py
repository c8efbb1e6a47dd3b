"""
Tests for web/app.py: the JSON routes, with fake upstream collaborators.

Run with: pytest tests/test_app.py
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from config.settings import Settings
from core.models import Country, EventPage, HistoricalEvent, SearchHit
from core.news import GatewayResponse, NewsGateway
from core.sources import OnThisDayClient, UpstreamError
from web.app import create_app


class FakeFeed:
    def __init__(self, events=None, error: bool = False):
        self.events = events or []
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def fetch_events(self, month, day):
        self.calls.append((month, day))
        if self.error:
            raise UpstreamError("Error accessing Wikipedia data.")
        return self.events


class FakeSearcher:
    def search(self, query):
        return [SearchHit(title="Roman Empire", snippet=f"about {query}")]


class FakeCountries:
    def __init__(self, error: bool = False):
        self.error = error

    def list_countries(self):
        if self.error:
            raise UpstreamError("Error accessing countries data.")
        return [Country(name="India", code="IN"), Country(name="Japan", code="JP")]


@pytest.fixture
def events() -> list[HistoricalEvent]:
    return [
        HistoricalEvent(
            year=1969,
            text="Apollo 11 lands on the Moon",
            pages=[EventPage(title="Apollo_11", url="https://en.wikipedia.org/wiki/Apollo_11")],
        ),
        HistoricalEvent(year=1815, text="The Battle of Waterloo is fought"),
        HistoricalEvent(year="n/a", text="A battle of unknown date"),
    ]


@pytest.fixture
def feed(events) -> FakeFeed:
    return FakeFeed(events)


@pytest.fixture
def gateway() -> MagicMock:
    gw = MagicMock(spec=NewsGateway)
    gw.handle.return_value = GatewayResponse(200, {"articles": [{"title": "A"}]})
    return gw


@pytest.fixture
def client(feed, gateway):
    app = create_app(
        settings=Settings(news_api_key="test-key"),
        gateway=gateway,
        feed=feed,
        searcher=FakeSearcher(),
        countries=FakeCountries(),
    )
    app.testing = True
    return app.test_client()


class TestEvents:
    def test_unfiltered(self, client, feed):
        resp = client.get("/api/events?month=7&day=20")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["month"] == "07" and data["day"] == "20"
        assert feed.calls == [("07", "20")]
        assert [e["year"] for e in data["events"]] == [1969, 1815, "n/a"]
        assert data["events"][0]["url"] == "https://en.wikipedia.org/wiki/Apollo_11"

    def test_bucket_and_category(self, client):
        resp = client.get("/api/events?month=06&day=18&bucket=1800s&category=wars")
        assert [e["year"] for e in resp.get_json()["events"]] == [1815]

    def test_unknown_selectors_pass_through(self, client):
        resp = client.get("/api/events?month=06&day=18&bucket=stone-age&category=gossip")
        assert len(resp.get_json()["events"]) == 3

    def test_missing_day_is_400(self, client, feed):
        resp = client.get("/api/events?month=06")

        assert resp.status_code == 400
        assert "Month and a Day" in resp.get_json()["error"]
        assert feed.calls == []

    def test_upstream_failure_is_502(self, gateway):
        app = create_app(
            settings=Settings(news_api_key="k"), gateway=gateway,
            feed=FakeFeed(error=True), searcher=FakeSearcher(), countries=FakeCountries(),
        )
        resp = app.test_client().get("/api/events?month=01&day=01")

        assert resp.status_code == 502
        assert resp.get_json() == {"error": "Error accessing Wikipedia data."}

    def test_malformed_feed_records_are_json_not_500(self, gateway):
        session = MagicMock()
        session.get.return_value.json.return_value = {"selected": [
            {"year": 1969.5, "text": "Fractional year"},
            {"year": [1969], "text": "List year"},
            {"year": 1815, "text": 7},
            {"year": 1950, "text": "Fine"},
        ]}
        app = create_app(
            settings=Settings(news_api_key="k"), gateway=gateway,
            feed=OnThisDayClient(session=session),
            searcher=FakeSearcher(), countries=FakeCountries(),
        )
        resp = app.test_client().get("/api/events?month=7&day=20&bucket=1900s")

        assert resp.status_code == 200
        assert [e["text"] for e in resp.get_json()["events"]] == ["Fractional year", "Fine"]

    @patch("web.app.today_month_day", return_value=("03", "14"))
    def test_today(self, _mock_today, client, feed):
        client.get("/api/events/today")
        assert feed.calls == [("03", "14")]

    def test_random(self, client, feed):
        resp = client.get("/api/events/random?bucket=1900s")

        assert resp.status_code == 200
        assert len(feed.calls) == 1
        assert [e["year"] for e in resp.get_json()["events"]] == [1969]

    def test_filters_listing(self, client):
        data = client.get("/api/filters").get_json()
        assert data["buckets"] == ["all", "2000+", "1900s", "1800s", "before-1800"]
        assert "wars" in data["categories"] and "all" in data["categories"]


class TestSearchAndCountries:
    def test_search(self, client):
        data = client.get("/api/search?q=rome").get_json()
        assert data["results"][0]["url"] == "https://en.wikipedia.org/wiki/Roman_Empire"

    def test_search_requires_q(self, client):
        assert client.get("/api/search?q=%20").status_code == 400

    def test_countries(self, client):
        data = client.get("/api/countries").get_json()
        assert data["countries"] == [
            {"name": "India", "code": "IN"},
            {"name": "Japan", "code": "JP"},
        ]

    def test_countries_upstream_failure(self, gateway):
        app = create_app(
            settings=Settings(news_api_key="k"), gateway=gateway,
            feed=FakeFeed(), searcher=FakeSearcher(), countries=FakeCountries(error=True),
        )
        assert app.test_client().get("/api/countries").status_code == 502


class TestNewsProxy:
    def test_relays_body_and_status(self, client, gateway):
        resp = client.post("/api/get-news", json={"query": "earthquake Japan"})

        assert resp.status_code == 200
        assert resp.get_json() == {"articles": [{"title": "A"}]}
        gateway.handle.assert_called_once_with({"query": "earthquake Japan"})

    def test_error_status_relayed(self, client, gateway):
        gateway.handle.return_value = GatewayResponse(400, {"error": "No search query provided."})
        resp = client.post("/api/get-news", json={"query": ""})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "No search query provided."

    def test_non_json_body_reaches_gateway_as_none(self, client, gateway):
        client.post("/api/get-news", data="not json", content_type="text/plain")
        gateway.handle.assert_called_once_with(None)

    def test_end_to_end_with_real_gateway(self, feed):
        session = MagicMock()
        session.get.return_value.json.return_value = {"status": "ok", "articles": [{"title": "B"}]}
        app = create_app(
            settings=Settings(news_api_key="k"),
            gateway=NewsGateway("k", session=session),
            feed=feed, searcher=FakeSearcher(), countries=FakeCountries(),
        )
        resp = app.test_client().post("/api/get-news", json={"query": "mars"})

        assert resp.status_code == 200
        assert resp.get_json() == {"articles": [{"title": "B"}]}

    def test_missing_key_end_to_end(self, feed):
        app = create_app(
            settings=Settings(news_api_key=""),
            feed=feed, searcher=FakeSearcher(), countries=FakeCountries(),
        )
        resp = app.test_client().post("/api/get-news", json={"query": "mars"})

        assert resp.status_code == 500
        assert "NEWS_API_KEY" in resp.get_json()["error"]
