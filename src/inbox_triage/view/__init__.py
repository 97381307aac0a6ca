"""Filtered views, inbox statistics and text rendering."""

from .engine import InboxStats, aggregate, filter_records, find_record, sort_records

__all__ = ["InboxStats", "aggregate", "filter_records", "find_record", "sort_records"]
