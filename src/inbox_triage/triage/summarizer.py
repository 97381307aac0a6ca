"""Extractive summary and key points from an email body."""

from __future__ import annotations

import re

from inbox_triage.models import NO_SUMMARY_PLACEHOLDER

_SENTENCE_BREAK = re.compile(r"[.!?]+")

SUMMARY_MIN_CHARS = 20
SUMMARY_SENTENCES = 2

KEY_POINT_MIN_CHARS = 10
KEY_POINT_SLICE = slice(2, 5)


def split_sentences(body: str) -> list[str]:
    return _SENTENCE_BREAK.split(body)


def summarize(body: str) -> tuple[str, list[str]]:
    """Summarise ``body``.

    The summary joins the first two sentences longer than 20 characters as
    they appear in the body, surrounding whitespace included. Key
    points are the third to fifth sentences longer than 10 characters. Both
    filters run over the same split independently.

    Returns:
        A ``(summary, key_points)`` tuple. ``summary`` is never empty and
        ``key_points`` has at most three entries.
    """

    sentences = split_sentences(body)

    long_sentences = [s for s in sentences if len(s.strip()) > SUMMARY_MIN_CHARS]
    if long_sentences:
        summary = ". ".join(long_sentences[:SUMMARY_SENTENCES]) + "."
    else:
        summary = NO_SUMMARY_PLACEHOLDER

    point_candidates = [s for s in sentences if len(s.strip()) > KEY_POINT_MIN_CHARS]
    key_points = [s.strip() for s in point_candidates[KEY_POINT_SLICE] if s.strip()]

    return summary, key_points
