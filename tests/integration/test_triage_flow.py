"""Integration tests running the full triage flow against an in-memory mailbox."""

from datetime import timedelta

import pytest

from inbox_triage.agent.session import TriageSession
from inbox_triage.models import Priority


@pytest.mark.integration
class TestTriageFlow:
    """Raw Gmail messages in, filtered view and stats out."""

    @pytest.mark.asyncio
    async def test_multipart_inbox_end_to_end(
        self, account_factory, message_factory, sample_email_data, sample_body, mock_settings, now
    ) -> None:
        spam = message_factory(
            "spam",
            subject="You won!!!",
            body="Claim your urgent prize now by sending your bank details",
            labels=["SPAM", "UNREAD"],
        )
        report = message_factory(
            "report",
            subject="Quarterly report",
            body=sample_body,
            labels=["INBOX", "IMPORTANT"],
            date="Sat, 17 Oct 2026 07:00:00 +0000",
        )
        stale = message_factory(
            "stale",
            subject="Old thread",
            body="Nothing to see here anymore",
            date="Mon, 03 Aug 2026 10:00:00 +0000",
            labels=["INBOX", "UNREAD"],
        )
        broken = message_factory("broken", subject="Garbled", date="not a date")
        broken["payload"]["body"] = {"data": "###"}

        account = account_factory([spam, sample_email_data, report, stale, broken])
        session = TriageSession(account, settings=mock_settings)

        assert await session.dispatch("sign_in") is True
        assert [r.id for r in session.records] == [
            "spam",
            "msg123456",
            "report",
            "stale",
            "broken",
        ]

        stats = session.stats()
        assert (stats.total, stats.unread, stats.important, stats.spam) == (5, 3, 1, 1)

        session.set_filter(max_age_days=30)
        view = session.view(now)
        assert [r.id for r in view] == ["report", "msg123456", "spam"]

        report_record = await session.dispatch("select", record_id="report", now=now)
        assert report_record.priority is Priority.HIGH
        assert report_record.summary == (
            " This is a qualifying sentence over twenty chars.  Another qualifying one here now."
        )
        assert list(report_record.key_points) == [
            "Third one goes here too",
            "Fourth sentence present",
            "Fifth sentence also present",
        ]

        broken_record = next(r for r in session.records if r.id == "broken")
        assert broken_record.body == ""
        assert broken_record.priority is Priority.MEDIUM

        session.set_filter(max_age_days=365 * 10, visibility="unread")
        assert [r.id for r in session.view(now)] == ["stale", "msg123456", "spam"]

        session.set_filter(max_age_days=365 * 10, visibility="all", priority="all")
        # The undated record never falls inside a finite age window.
        assert [r.id for r in session.view(now)] == ["report", "stale", "msg123456", "spam"]
        assert session.view(now + timedelta(days=1)) == session.view(now + timedelta(days=1))
