"""Unit tests for the UTC day helpers and clocks."""

from datetime import date, datetime, timedelta, timezone

from dailycode.shared.datetime_utils import FixedClock, days_back, ensure_utc, to_day


class TestToDay:
    """Tests for truncating instants to UTC days."""

    def test_naive_datetime_is_utc(self):
        assert to_day(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)

    def test_offset_datetime_is_converted_first(self):
        late_evening_west = datetime(2024, 3, 10, 20, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert to_day(late_evening_west) == date(2024, 3, 11)

    def test_date_passes_through(self):
        assert to_day(date(2024, 3, 10)) == date(2024, 3, 10)

    def test_days_back_newest_first(self):
        assert days_back(date(2024, 3, 1), 3) == [
            date(2024, 3, 1),
            date(2024, 2, 29),
            date(2024, 2, 28),
        ]


class TestFixedClock:
    """Tests for the pinned clock used by tests and replayed jobs."""

    def test_date_pins_to_midnight_utc(self):
        clock = FixedClock(date(2024, 3, 10))

        assert clock.today() == date(2024, 3, 10)
        assert clock.now() == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_naive_datetime_is_treated_as_utc(self):
        clock = FixedClock(datetime(2024, 3, 10, 9, 30))

        assert clock.now() == ensure_utc(datetime(2024, 3, 10, 9, 30))
        assert clock.now().tzinfo is timezone.utc

    def test_advance_crosses_midnight(self):
        clock = FixedClock(date(2024, 3, 10))

        clock.advance(hours=25)

        assert clock.today() == date(2024, 3, 11)
