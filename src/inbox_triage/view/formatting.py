"""Plain-text rendering of records for the terminal front end."""

from __future__ import annotations

import math
import textwrap
from collections.abc import Sequence
from datetime import datetime, timezone

from inbox_triage.models import UNKNOWN_DATE, EmailRecord, Layout
from inbox_triage.view.engine import InboxStats

NO_EMAILS_MESSAGE = "No emails match the current filters."

_SECONDS_PER_DAY = 60 * 60 * 24


def format_relative_date(date: datetime, now: datetime | None = None) -> str:
    """Describe ``date`` relative to ``now`` ("Yesterday", "3 weeks ago", ...)."""

    if date == UNKNOWN_DATE:
        return "Unknown date"

    reference = now or datetime.now(timezone.utc)
    diff_days = math.ceil(abs((reference - date).total_seconds()) / _SECONDS_PER_DAY)

    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{math.ceil(diff_days / 7)} weeks ago"
    if diff_days < 365:
        return f"{math.ceil(diff_days / 30)} months ago"
    return f"{math.ceil(diff_days / 365)} years ago"


def render_list_item(record: EmailRecord, now: datetime | None = None) -> str:
    marker = " " if record.is_read else "*"
    star = "S" if record.is_starred else " "
    return (
        f"{marker}{star} [{record.priority.value:<6}] {record.id}\t"
        f"{format_relative_date(record.date, now)}\t{record.sender}\t{record.subject}"
    )


def render_card(record: EmailRecord, now: datetime | None = None) -> str:
    lines = [
        f"{record.subject or '(no subject)'}  [{record.priority.value}]",
        f"From: {record.sender}",
        format_relative_date(record.date, now),
        textwrap.fill(record.summary, width=78),
    ]
    lines.extend(f"  - {point}" for point in record.key_points)
    lines.append(f"id: {record.id}{'' if record.is_read else '  (unread)'}")
    return "\n".join(lines)


def render_detail(record: EmailRecord, now: datetime | None = None) -> str:
    lines = [
        f"Subject:  {record.subject}",
        f"From:     {record.sender}",
        f"Date:     {format_relative_date(record.date, now)}",
        f"Priority: {record.priority.value}",
        "",
        "Summary:",
        textwrap.fill(record.summary, width=78, initial_indent="  ", subsequent_indent="  "),
    ]
    if record.key_points:
        lines.append("")
        lines.append("Key points:")
        lines.extend(f"  - {point}" for point in record.key_points)
    return "\n".join(lines)


def render_stats(stats: InboxStats) -> str:
    return (
        f"Total: {stats.total}  Unread: {stats.unread}  "
        f"Important: {stats.important}  Spam: {stats.spam}"
    )


def render_records(
    records: Sequence[EmailRecord],
    layout: Layout = Layout.LIST,
    now: datetime | None = None,
) -> str:
    """Render a filtered view in the requested layout."""

    if not records:
        return NO_EMAILS_MESSAGE
    if layout is Layout.CARD:
        return "\n\n".join(render_card(r, now) for r in records)
    return "\n".join(render_list_item(r, now) for r in records)
