"""Tests for the observation date/time codec."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from ebird_notifier.exceptions import DecodeError
from ebird_notifier.timecodec import CanonicalTimestamp, decode, parse, render


class TestDecode:
    """Decoding eBird ``obsDt`` values."""

    def test_date_and_time(self) -> None:
        ts = decode("2024-04-01 06:30")
        assert ts == CanonicalTimestamp(date(2024, 4, 1), time(6, 30))
        assert ts.has_time

    def test_date_only(self) -> None:
        ts = decode("2024-04-01")
        assert ts == CanonicalTimestamp(date(2024, 4, 1))
        assert not ts.has_time

    def test_separate_time(self) -> None:
        assert decode("2024-04-01", "17:05") == CanonicalTimestamp(date(2024, 4, 1), time(17, 5))

    def test_seconds_dropped(self) -> None:
        assert decode("2024-04-01 06:30:59").time_of_day == time(6, 30)

    def test_invalid_calendar_date(self) -> None:
        with pytest.raises(DecodeError):
            decode("2024-02-30")

    def test_garbage_date(self) -> None:
        with pytest.raises(DecodeError):
            decode("yesterday")

    def test_garbage_time(self) -> None:
        with pytest.raises(DecodeError):
            decode("2024-04-01 noon")


class TestRender:
    """Rendering the persisted text form."""

    def test_date_only(self) -> None:
        assert render(CanonicalTimestamp(date(2024, 4, 1))) == "4/1/2024"

    def test_minutes_padded_hours_not(self) -> None:
        assert render(CanonicalTimestamp(date(2024, 4, 1), time(6, 5))) == "4/1/2024 6:05"

    def test_afternoon(self) -> None:
        assert render(CanonicalTimestamp(date(2023, 12, 31), time(23, 59))) == "12/31/2023 23:59"

    def test_midnight(self) -> None:
        assert render(CanonicalTimestamp(date(2024, 1, 9), time(0, 0))) == "1/9/2024 0:00"


class TestParse:
    """Parsing persisted text back into timestamps."""

    def test_with_time(self) -> None:
        assert parse("4/1/2024 6:30") == CanonicalTimestamp(date(2024, 4, 1), time(6, 30))

    def test_date_only(self) -> None:
        ts = parse("4/1/2024")
        assert ts == CanonicalTimestamp(date(2024, 4, 1))
        assert not ts.has_time

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "4-1-2024",
            "4/1",
            "a/1/2024",
            "4/1/2024 6",
            "4/1/2024 6:x0",
            "4/1/2024 6:30 PM",
            "13/1/2024",
            "4/1/2024 25:00",
            "-4/1/2024",
        ],
    )
    def test_malformed(self, text: str) -> None:
        with pytest.raises(DecodeError):
            parse(text)

    def test_free_text_reports_date_shape(self) -> None:
        with pytest.raises(DecodeError, match="Expected M/D/YYYY"):
            parse("not a date")

    def test_trailing_data(self) -> None:
        with pytest.raises(DecodeError, match="trailing data"):
            parse("4/1/2024 6:30 PM")

    @pytest.mark.parametrize(
        "ts",
        [
            CanonicalTimestamp(date(2024, 4, 1)),
            CanonicalTimestamp(date(2024, 4, 1), time(6, 30)),
            CanonicalTimestamp(date(1999, 12, 31), time(0, 0)),
            CanonicalTimestamp(date(2024, 2, 29), time(23, 59)),
        ],
    )
    def test_round_trip(self, ts: CanonicalTimestamp) -> None:
        assert parse(render(ts)) == ts


class TestCanonicalTimestamp:
    """Comparison helpers."""

    def test_as_datetime_with_time(self) -> None:
        ts = CanonicalTimestamp(date(2024, 4, 1), time(6, 30))
        assert ts.as_datetime() == datetime(2024, 4, 1, 6, 30)

    def test_as_datetime_date_only_is_midnight(self) -> None:
        assert CanonicalTimestamp(date(2024, 4, 1)).as_datetime() == datetime(2024, 4, 1)
