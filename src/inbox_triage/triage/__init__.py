"""Heuristic priority classification and summarisation."""

from .classifier import classify
from .summarizer import summarize

__all__ = ["classify", "summarize"]
