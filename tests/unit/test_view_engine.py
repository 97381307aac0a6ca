"""Unit tests for filtering, sorting and aggregation."""

from datetime import timedelta

from inbox_triage.models import UNKNOWN_DATE, FilterCriteria, Priority, Visibility
from inbox_triage.view.engine import aggregate, filter_records, find_record, sort_records


class TestSortRecords:
    """Test suite for sort_records()."""

    def test_higher_tier_first_regardless_of_date(self, record_factory, now) -> None:
        old_high = record_factory(
            "old-high", priority=Priority.HIGH, date=now - timedelta(days=20)
        )
        new_low = record_factory("new-low", priority=Priority.LOW, date=now)
        spam = record_factory("spam", priority=Priority.SPAM, date=now)
        medium = record_factory(
            "medium", priority=Priority.MEDIUM, date=now - timedelta(days=40)
        )

        ordered = sort_records([spam, new_low, medium, old_high])

        assert [r.id for r in ordered] == ["old-high", "medium", "new-low", "spam"]

    def test_equal_tier_newest_first(self, record_factory, now) -> None:
        older = record_factory("older", date=now - timedelta(hours=5))
        newer = record_factory("newer", date=now)
        unknown = record_factory("unknown", date=UNKNOWN_DATE)

        ordered = sort_records([unknown, older, newer])

        assert [r.id for r in ordered] == ["newer", "older", "unknown"]

    def test_equal_keys_keep_input_order(self, record_factory, now) -> None:
        first = record_factory("first", date=now)
        second = record_factory("second", date=now)

        assert [r.id for r in sort_records([first, second])] == ["first", "second"]
        assert [r.id for r in sort_records([second, first])] == ["second", "first"]


class TestFilterRecords:
    """Test suite for filter_records()."""

    def test_age_window(self, record_factory, now) -> None:
        recent = record_factory("recent", date=now - timedelta(days=2))
        boundary = record_factory("boundary", date=now - timedelta(days=7))
        old = record_factory("old", date=now - timedelta(days=8))
        unknown = record_factory("unknown", date=UNKNOWN_DATE)

        criteria = FilterCriteria(max_age_days=7)

        result = filter_records([recent, boundary, old, unknown], criteria, now=now)

        assert [r.id for r in result] == ["recent", "boundary"]

    def test_zero_day_window_keeps_only_now_or_future(self, record_factory, now) -> None:
        current = record_factory("current", date=now)
        earlier = record_factory("earlier", date=now - timedelta(minutes=1))

        result = filter_records([current, earlier], FilterCriteria(max_age_days=0), now=now)

        assert [r.id for r in result] == ["current"]

    def test_priority_filter(self, record_factory, now) -> None:
        records = [
            record_factory("h", priority=Priority.HIGH),
            record_factory("l", priority=Priority.LOW),
        ]

        result = filter_records(records, FilterCriteria(priority="low"), now=now)

        assert [r.id for r in result] == ["l"]

    def test_visibility_filters(self, record_factory, now) -> None:
        unread = record_factory("unread", is_read=False)
        read = record_factory("read", is_read=True)
        starred = record_factory("starred", is_read=True, is_starred=True)
        records = [unread, read, starred]

        def ids(visibility: Visibility) -> list[str]:
            result = filter_records(records, FilterCriteria(visibility=visibility), now=now)
            return [r.id for r in result]

        assert ids(Visibility.ALL) == ["unread", "read", "starred"]
        assert ids(Visibility.UNREAD) == ["unread"]
        assert ids(Visibility.READ) == ["read", "starred"]
        assert ids(Visibility.STARRED) == ["starred"]

    def test_filter_is_idempotent(self, record_factory, now) -> None:
        records = [
            record_factory("a", priority=Priority.LOW, date=now - timedelta(days=1)),
            record_factory("b", priority=Priority.HIGH, date=now - timedelta(days=3)),
            record_factory("c", priority=Priority.HIGH, date=now - timedelta(days=2)),
        ]
        criteria = FilterCriteria(max_age_days=30)

        once = filter_records(records, criteria, now=now)
        twice = filter_records(once, criteria, now=now)

        assert [r.id for r in once] == ["c", "b", "a"]
        assert twice == once

    def test_huge_age_window_keeps_everything(self, record_factory, now) -> None:
        records = [record_factory("unknown", date=UNKNOWN_DATE)]

        result = filter_records(records, FilterCriteria(max_age_days=10**12), now=now)

        assert len(result) == 1

    def test_end_to_end_scenario(self, record_factory, now) -> None:
        """Only the unread, in-range high priority record survives."""
        low = record_factory(
            "low", priority=Priority.LOW, is_read=True, date=now - timedelta(days=1)
        )
        high = record_factory(
            "high", priority=Priority.HIGH, is_read=False, date=now - timedelta(days=3)
        )
        spam = record_factory("spam", priority=Priority.SPAM, is_read=True, date=now)
        criteria = FilterCriteria(max_age_days=30, priority="all", visibility="unread")

        result = filter_records([low, high, spam], criteria, now=now)

        assert result == [high]


class TestAggregate:
    """Test suite for aggregate()."""

    def test_counts(self, record_factory) -> None:
        records = [
            record_factory("1", priority=Priority.HIGH, is_read=False),
            record_factory("2", priority=Priority.HIGH, is_read=True),
            record_factory("3", priority=Priority.SPAM, is_read=False),
            record_factory("4", priority=Priority.LOW, is_read=True),
        ]

        stats = aggregate(records)

        assert stats.total == 4
        assert stats.unread == 2
        assert stats.important == 2
        assert stats.spam == 1
        read_count = sum(1 for r in records if r.is_read)
        assert stats.unread + read_count == stats.total

    def test_empty(self) -> None:
        stats = aggregate([])

        assert (stats.total, stats.unread, stats.important, stats.spam) == (0, 0, 0, 0)


def test_find_record(record_factory) -> None:
    records = [record_factory("a"), record_factory("b")]

    assert find_record(records, "b") is records[1]
    assert find_record(records, "zzz") is None
