# tests/unit/test_git_records.py

"""Unit tests for commit record parsing and date filtering."""

import pytest
from datetime import datetime, timedelta, timezone

from git_records import (
    FIELD_SEPARATOR,
    CommitRecord,
    filter_by_date,
    parse_date,
    parse_log_line,
    parse_raw_date,
)


class TestParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1700000000 +0130", (1700000000, 90)),
            ("1700000000 -0500", (1700000000, -300)),
            ("1700000000 +0000", (1700000000, 0)),
            ("1700000000", (1700000000, 0)),
        ],
    )
    def test_parse_raw_date(self, raw, expected):
        assert parse_raw_date(raw) == expected

    def test_parse_log_line(self):
        line = FIELD_SEPARATOR.join(
            ["abc1234", "1612274400 +0200", "Bob | Builder", "bob@example.com"]
        )
        assert parse_log_line(line) == CommitRecord(
            timestamp=1612274400,
            utc_offset_minutes=120,
            author_name="Bob | Builder",
            author_email="bob@example.com",
        )

    def test_parse_log_line_empty_author_fields(self):
        line = FIELD_SEPARATOR.join(["abc1234", "1612274400 +0000", "", ""])
        record = parse_log_line(line)
        assert record.author_name is None
        assert record.author_email is None

    @pytest.mark.parametrize(
        "line",
        [
            "not a log line",
            FIELD_SEPARATOR.join(["abc1234", "yesterday", "Bob", "bob@example.com"]),
        ],
    )
    def test_parse_log_line_malformed(self, line):
        assert parse_log_line(line) is None

    def test_parse_date(self):
        assert parse_date("2020-01-05") == datetime(2020, 1, 5, tzinfo=timezone.utc)

    def test_parse_date_invalid(self):
        with pytest.raises(ValueError):
            parse_date("05/01/2020")


class TestCommitRecord:
    def test_local_datetime_uses_own_offset(self):
        record = CommitRecord(timestamp=1612274400, utc_offset_minutes=-300)
        local = record.local_datetime
        assert local.utcoffset() == timedelta(minutes=-300)
        assert local.timestamp() == 1612274400

    def test_is_immutable(self):
        record = CommitRecord(timestamp=0)
        with pytest.raises(AttributeError):
            record.timestamp = 1

    @pytest.mark.parametrize(
        "timestamp, offset_minutes",
        [(1612274400, 1500), (1612274400, -1440), (2**62, 0), (-(2**62), 0)],
    )
    def test_local_datetime_unrepresentable(self, timestamp, offset_minutes):
        record = CommitRecord(timestamp=timestamp, utc_offset_minutes=offset_minutes)
        assert record.local_datetime is None

    def test_corrupt_timezone_from_log(self):
        line = FIELD_SEPARATOR.join(["abc", "1600000000 +9959", "alice", "a@x"])
        record = parse_log_line(line)
        assert record.utc_offset_minutes == 6019
        assert record.local_datetime is None


class TestFilterByDate:
    def _records(self):
        return [
            CommitRecord(
                timestamp=int(datetime(2020, 1, d, 12, tzinfo=timezone.utc).timestamp())
            )
            for d in range(1, 11)
        ]

    def test_no_bounds_keeps_everything(self):
        assert len(list(filter_by_date(self._records()))) == 10

    def test_bounds_are_inclusive(self):
        since = datetime(2020, 1, 3, 12, tzinfo=timezone.utc)
        until = datetime(2020, 1, 5, 12, tzinfo=timezone.utc)
        kept = list(filter_by_date(self._records(), since=since, until=until))
        assert [r.timestamp for r in kept] == [
            int(datetime(2020, 1, d, 12, tzinfo=timezone.utc).timestamp())
            for d in (3, 4, 5)
        ]

    def test_date_only_bounds(self):
        kept = list(
            filter_by_date(
                self._records(),
                since=parse_date("2020-01-05"),
                until=parse_date("2020-01-07"),
            )
        )
        assert len(kept) == 2
