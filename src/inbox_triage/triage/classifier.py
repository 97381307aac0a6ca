"""Rule-based priority classification.

Rules are evaluated in order and the first match wins. Keyword matching is a
case-insensitive substring test, so "sale" also matches "wholesale"; this is a
known limitation of the heuristic.
"""

from __future__ import annotations

from collections.abc import Iterable

from inbox_triage.models import Priority

SPAM_LABEL = "SPAM"
IMPORTANT_LABEL = "IMPORTANT"

URGENT_KEYWORDS: tuple[str, ...] = ("urgent", "asap", "emergency", "deadline", "important")
PROMOTIONAL_KEYWORDS: tuple[str, ...] = ("sale", "discount", "offer", "promotion", "newsletter")


def _mentions_any(keywords: Iterable[str], *texts: str) -> bool:
    lowered = [t.lower() for t in texts]
    return any(keyword in text for keyword in keywords for text in lowered)


def classify(
    subject: str,
    sender: str,
    body: str,
    labels: Iterable[str],
) -> Priority:
    """Assign a priority tier to a message.

    Args:
        subject: Subject header.
        sender: From header. Not used by the current rules.
        body: Decoded plain-text body.
        labels: Gmail label ids of the message.

    Returns:
        Priority: ``SPAM`` for spam-labelled mail, ``HIGH`` for
        important-labelled or urgent mail, ``LOW`` for promotional mail and
        ``MEDIUM`` otherwise.
    """

    label_set = set(labels)
    if SPAM_LABEL in label_set:
        return Priority.SPAM
    if IMPORTANT_LABEL in label_set:
        return Priority.HIGH
    if _mentions_any(URGENT_KEYWORDS, subject, body):
        return Priority.HIGH
    if _mentions_any(PROMOTIONAL_KEYWORDS, subject, body):
        return Priority.LOW
    return Priority.MEDIUM
