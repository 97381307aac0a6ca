"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import base64
from datetime import datetime, timezone
from typing import Any

import pytest
import structlog

from inbox_triage.exceptions import GmailAPIError
from inbox_triage.models import EmailRecord, Priority, UserProfile

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def b64url(text: str) -> str:
    """Encode text the way Gmail encodes body data (URL-safe, unpadded)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_record(record_id: str = "m1", **overrides: Any) -> EmailRecord:
    fields: dict[str, Any] = {
        "id": record_id,
        "thread_id": f"t-{record_id}",
        "subject": "Subject",
        "sender": "sender@example.com",
        "date": NOW,
        "priority": Priority.MEDIUM,
    }
    fields.update(overrides)
    return EmailRecord(**fields)


def make_message(
    message_id: str,
    *,
    subject: str = "Hello",
    sender: str = "alice@example.com",
    date: str = "Fri, 16 Oct 2026 09:00:00 +0000",
    body: str = "",
    labels: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "id": message_id,
        "threadId": f"thread-{message_id}",
        "labelIds": labels if labels is not None else ["INBOX"],
        "payload": {
            "mimeType": "text/plain",
            "headers": [
                {"name": "Subject", "value": subject},
                {"name": "From", "value": sender},
                {"name": "Date", "value": date},
            ],
            "body": {"data": b64url(body)} if body else {"size": 0},
        },
    }


class FakeAccount:
    """In-memory stand-in for GmailClient."""

    def __init__(self, messages: list[dict[str, Any]] | None = None) -> None:
        self.messages = {m["id"]: m for m in messages or []}
        self.order = [m["id"] for m in messages or []]
        self.authenticated = False
        self.fail_listing = False
        self.failing_ids: set[str] = set()
        self.get_calls: list[str] = []
        self.list_limits: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.delay = 0.0

    def is_authenticated(self) -> bool:
        return self.authenticated

    async def sign_in(self) -> None:
        self.authenticated = True

    async def sign_out(self) -> None:
        self.authenticated = False

    async def get_profile(self) -> UserProfile:
        return UserProfile(name="Ada Lovelace", avatar_url="https://example.com/ada.png")

    async def list_inbox_message_ids(self, limit: int) -> list[dict[str, Any]]:
        self.list_limits.append(limit)
        if self.fail_listing:
            raise GmailAPIError("listing failed")
        return [{"id": i, "threadId": f"thread-{i}"} for i in self.order[:limit]]

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        self.get_calls.append(message_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if message_id in self.failing_ids:
                raise GmailAPIError(f"cannot fetch {message_id}")
            return self.messages[message_id]
        finally:
            self.in_flight -= 1


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings isolated from the working directory."""
    from inbox_triage.config import Settings

    return Settings(
        gmail_credentials_path=tmp_path / "credentials.json",
        gmail_token_path=tmp_path / "token.json",
        preferences_db_path=tmp_path / "prefs.sqlite3",
        log_level="DEBUG",
        debug=True,
        max_retries=0,
        retry_delay=0.0,
    )


@pytest.fixture
def sample_body() -> str:
    """Body whose sentences exercise both summary thresholds."""
    return (
        "Short. This is a qualifying sentence over twenty chars. "
        "Another qualifying one here now. Third one goes here too. "
        "Fourth sentence present. Fifth sentence also present."
    )


@pytest.fixture
def sample_email_data() -> dict[str, Any]:
    """Provide a multipart Gmail message in format=full."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "UNREAD", "STARRED"],
        "snippet": "Weekly Newsletter - Python Tips",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "Subject", "value": "Weekly Newsletter - Python Tips"},
                {"name": "From", "value": "Python Weekly <newsletter@python.org>"},
                {"name": "To", "value": "user@example.com"},
                {"name": "Date", "value": "Thu, 15 Oct 2026 08:30:00 +0200"},
            ],
            "body": {"size": 0},
            "parts": [
                {
                    "mimeType": "text/plain",
                    "body": {"data": b64url("Welcome to this week's Python tips! ")},
                },
                {
                    "mimeType": "text/html",
                    "body": {"data": b64url("<p>Welcome</p>")},
                },
            ],
        },
    }


@pytest.fixture
def fake_account() -> FakeAccount:
    return FakeAccount(
        [
            make_message("a", subject="Lunch?", body="Are you free for lunch tomorrow at noon"),
            make_message("b", subject="URGENT: server down", labels=["INBOX", "UNREAD"]),
            make_message("c", subject="Big sale this weekend", labels=["INBOX", "STARRED"]),
        ]
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def account_factory():
    return FakeAccount


@pytest.fixture
def encode():
    return b64url


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration applied by the CLI entry point."""
    yield
    structlog.reset_defaults()
