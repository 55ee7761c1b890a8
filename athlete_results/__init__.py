"""Athlete results scraper.

Fetches athlete profile pages from Flowrestling, WrestlingTournaments and
TrackWrestling, extracts competition results heuristically, and maintains a
deduplicated, date-sorted JSON file of results.
"""

__version__ = "0.1.0"
