"""Triaged email record model.

A record is built once per fetched message and never mutated afterwards. The
whole collection is replaced on the next fetch.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from inbox_triage.models.priority import Priority

# Orders before every parseable Date header.
UNKNOWN_DATE = datetime.min.replace(tzinfo=timezone.utc)

NO_SUMMARY_PLACEHOLDER = "No summary available for this email."


class EmailRecord(BaseModel):
    """A decoded, classified and summarised inbox message."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Gmail message ID")
    thread_id: str = Field(default="", description="Gmail thread ID")

    subject: str = Field(default="", description="Subject header")
    sender: str = Field(default="", description="Raw From header")
    date: datetime = Field(
        default=UNKNOWN_DATE,
        description="Parsed Date header (UNKNOWN_DATE when missing or unparseable)",
    )

    body: str = Field(default="", description="Decoded plain-text body")
    summary: str = Field(default=NO_SUMMARY_PLACEHOLDER, min_length=1)
    key_points: tuple[str, ...] = Field(default=(), max_length=3)

    priority: Priority = Field(description="Priority tier")

    is_read: bool = Field(default=True, description="UNREAD label absent")
    is_starred: bool = Field(default=False, description="STARRED label present")
    is_important: bool = Field(default=False, description="IMPORTANT label present")
    is_spam: bool = Field(default=False, description="SPAM label present")

    @property
    def has_known_date(self) -> bool:
        return self.date != UNKNOWN_DATE
