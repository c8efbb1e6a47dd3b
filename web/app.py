"""
Flask web server for History Lookup.

Routes
──────
POST /api/get-news                    Relay a news search via the NewsAPI proxy
GET  /api/events?month=&day=          On-this-day events, filtered (JSON)
GET  /api/events/today                Same, for today's date
GET  /api/events/random               Same, for a random date
GET  /api/search?q=...                Wikipedia topic search (JSON)
GET  /api/countries                   Countries sorted by name (JSON)
GET  /api/filters                     Available year buckets and categories

The event routes accept optional ``bucket`` and ``category`` query params.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

# Allow running as `python web/app.py` from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

from config.settings import Settings
from core.dates import normalize_month_day, random_month_day, today_month_day
from core.filters import Category, YearBucket, apply_filters
from core.news import NewsGateway
from core.sources import CountriesClient, OnThisDayClient, UpstreamError, WikiSearchClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[NewsGateway] = None,
    feed: Optional[OnThisDayClient] = None,
    searcher: Optional[WikiSearchClient] = None,
    countries: Optional[CountriesClient] = None,
) -> Flask:
    """Build the Flask app, wiring collaborators from *settings* unless given."""
    settings = settings or Settings()
    timeout = settings.upstream_timeout

    gateway = gateway or NewsGateway(
        api_key=settings.news_api_key, url=settings.news_api_url, timeout=timeout,
    )
    feed = feed or OnThisDayClient(settings.onthisday_url, timeout=timeout)
    searcher = searcher or WikiSearchClient(settings.wiki_search_url, timeout=timeout)
    countries = countries or CountriesClient(settings.countries_url, timeout=timeout)

    app = Flask(__name__)

    # ── Events ─────────────────────────────────────────────────────────────

    def events_response(month: str, day: str):
        bucket = request.args.get("bucket", YearBucket.ALL.value)
        category = request.args.get("category", Category.ALL.value)
        try:
            events = feed.fetch_events(month, day)
        except UpstreamError as exc:
            return jsonify({"error": str(exc)}), 502

        filtered = apply_filters(events, bucket, category)
        return jsonify(
            {
                "month": month,
                "day": day,
                "events": [
                    {"year": e.year, "text": e.text, "url": e.article_url}
                    for e in filtered
                ],
            }
        )

    @app.route("/api/events")
    def list_events():
        """Return the selected events for ``month``/``day``, filtered."""
        try:
            month, day = normalize_month_day(
                request.args.get("month"), request.args.get("day")
            )
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        return events_response(month, day)

    @app.route("/api/events/today")
    def today_events():
        return events_response(*today_month_day())

    @app.route("/api/events/random")
    def random_events():
        return events_response(*random_month_day())

    @app.route("/api/filters")
    def list_filters():
        """Return the selector values for the era and category dropdowns."""
        return jsonify(
            {
                "buckets": [b.value for b in YearBucket],
                "categories": [c.value for c in Category],
            }
        )

    # ── Search & countries ─────────────────────────────────────────────────

    @app.route("/api/search")
    def topic_search():
        query = request.args.get("q", "").strip()
        if not query:
            return jsonify({"error": "q query param is required"}), 400
        try:
            hits = searcher.search(query)
        except UpstreamError as exc:
            return jsonify({"error": str(exc)}), 502
        return jsonify(
            {
                "results": [
                    {"title": h.title, "snippet": h.snippet, "url": h.url}
                    for h in hits
                ]
            }
        )

    @app.route("/api/countries")
    def list_countries():
        try:
            result = countries.list_countries()
        except UpstreamError as exc:
            return jsonify({"error": str(exc)}), 502
        return jsonify({"countries": [c.model_dump() for c in result]})

    # ── News proxy ─────────────────────────────────────────────────────────

    @app.route("/api/get-news", methods=["POST"])
    def get_news():
        """Relay ``{"query": ...}`` to NewsAPI with the server-held key."""
        result = gateway.handle(request.get_json(silent=True))
        return jsonify(result.body), result.status

    return app


app = create_app()


# ── Entry point ────────────────────────────────────────────────────────────

if __name__ == "__main__":
    settings = Settings()
    try:
        settings.validate()
    except ValueError as exc:
        logger.warning("%s News searches will fail until it is set.", exc)
    app.run(debug=settings.debug, host="0.0.0.0", port=settings.port)
