"""Inbox ingestion: bounded concurrent fetch into the working set."""

from .pipeline import IngestionPipeline, MessageSource

__all__ = ["IngestionPipeline", "MessageSource"]
