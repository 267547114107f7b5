"""Tests for shared calendar helpers."""

from datetime import date, datetime

from petshop_booking.utils import is_bookable_date, is_past_date, is_same_day, is_weekend

TODAY = date(2025, 3, 17)  # Monday


class TestIsSameDay:
    def test_datetime_and_date(self):
        assert is_same_day(datetime(2025, 3, 18, 9, 30), date(2025, 3, 18))

    def test_different_days(self):
        assert not is_same_day(datetime(2025, 3, 18, 23, 59), datetime(2025, 3, 19, 0, 0))

    def test_same_day_different_month(self):
        assert not is_same_day(date(2025, 4, 18), date(2025, 3, 18))


class TestWeekend:
    def test_saturday_and_sunday(self):
        assert is_weekend(date(2025, 3, 22))
        assert is_weekend(date(2025, 3, 23))

    def test_friday(self):
        assert not is_weekend(date(2025, 3, 21))


class TestBookableDate:
    def test_today_is_not_past(self):
        assert not is_past_date(TODAY, TODAY)
        assert is_bookable_date(TODAY, TODAY)

    def test_yesterday_is_past(self):
        assert is_past_date(date(2025, 3, 16), TODAY)

    def test_weekend_not_bookable(self):
        assert not is_bookable_date(date(2025, 3, 22), TODAY)

    def test_future_weekday(self):
        assert is_bookable_date(datetime(2025, 3, 20, 10), TODAY)
