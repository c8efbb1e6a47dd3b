"""
History Lookup core package.

Modules
───────
models: Pydantic data models (HistoricalEvent, EventPage, SearchHit, Country)
filters: year-bucket and keyword-category event filters
news: NewsAPI proxy gateway holding the server-side key
sources: Wikipedia feed / search and countries clients
dates: month/day validation, today and random date picks
"""
