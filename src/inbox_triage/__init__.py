"""Inbox Triage - heuristic email prioritisation and summaries for Gmail.

This package fetches a bounded slice of a Gmail inbox, classifies every
message into a priority tier, derives a short extractive summary and exposes
filtered, sorted views and inbox statistics.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from inbox_triage.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
