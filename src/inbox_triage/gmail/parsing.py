"""Helpers for turning Gmail messages into triaged email records."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from inbox_triage.gmail.decoding import extract_body, header_lookup
from inbox_triage.models import UNKNOWN_DATE, EmailRecord
from inbox_triage.triage.classifier import IMPORTANT_LABEL, SPAM_LABEL, classify
from inbox_triage.triage.summarizer import summarize

UNREAD_LABEL = "UNREAD"
STARRED_LABEL = "STARRED"


def _parse_date(value: str | None) -> datetime:
    if not value:
        return UNKNOWN_DATE
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, OverflowError, IndexError):
        return UNKNOWN_DATE
    if parsed is None:
        return UNKNOWN_DATE
    # "-0000" zones come back naive.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _label_ids(message: dict[str, Any]) -> list[str]:
    label_ids = message.get("labelIds") or []
    if not isinstance(label_ids, list):
        return []
    return [x for x in label_ids if isinstance(x, str)]


def message_to_email_record(message: dict[str, Any]) -> EmailRecord:
    """Convert a Gmail API message (format=full) to an EmailRecord.

    Malformed payloads degrade to empty fields; a record is always returned.

    Args:
        message: Gmail API message dict.

    Returns:
        EmailRecord: Decoded, classified and summarised record.
    """

    header = header_lookup(message)
    labels = _label_ids(message)

    subject = header("Subject")
    sender = header("From")
    body = extract_body(message.get("payload"))

    summary, key_points = summarize(body)

    return EmailRecord(
        id=str(message.get("id") or ""),
        thread_id=str(message.get("threadId") or ""),
        subject=subject,
        sender=sender,
        date=_parse_date(header("Date")),
        body=body,
        summary=summary,
        key_points=tuple(key_points),
        priority=classify(subject, sender, body, labels),
        is_read=UNREAD_LABEL not in labels,
        is_starred=STARRED_LABEL in labels,
        is_important=IMPORTANT_LABEL in labels,
        is_spam=SPAM_LABEL in labels,
    )
