# tests/test_date_parsing.py
#
# Tests for deadline normalization. Numeric dates are always day-first.

from datetime import datetime, date, timezone

import pytest

from digital_twin.services.date_parsing import parse_deadline, to_local_naive, end_of_day


# 2026-10-18 is a Sunday
NOW = datetime(2026, 10, 18, 10, 0)


class TestRelativeDeadlines:

    def test_today_is_end_of_today(self):
        assert parse_deadline("today", NOW) == datetime(2026, 10, 18, 23, 59)

    def test_tomorrow(self):
        assert parse_deadline("Tomorrow", NOW) == datetime(2026, 10, 19, 23, 59)

    def test_weekday_name_is_next_occurrence(self):
        assert parse_deadline("Friday", NOW) == datetime(2026, 10, 23, 23, 59)

    def test_todays_weekday_name_means_next_week(self):
        assert parse_deadline("sunday", NOW) == datetime(2026, 10, 25, 23, 59)


class TestDayFirstDates:

    def test_ambiguous_date_is_day_first(self):
        assert parse_deadline("03/04/2026", NOW) == datetime(2026, 4, 3, 23, 59)

    def test_two_digit_year(self):
        assert parse_deadline("03/04/27", NOW) == datetime(2027, 4, 3, 23, 59)

    def test_without_year_uses_current_year(self):
        assert parse_deadline("25/12", NOW) == datetime(2026, 12, 25, 23, 59)

    def test_invalid_day_first_date_is_dropped(self):
        assert parse_deadline("12/25/2026", NOW) is None


class TestIsoDeadlines:

    def test_date_only_is_end_of_day(self):
        assert parse_deadline("2026-10-20", NOW) == datetime(2026, 10, 20, 23, 59)

    def test_datetime_keeps_time(self):
        assert parse_deadline("2026-10-20T15:30:00", NOW) == datetime(2026, 10, 20, 15, 30)

    def test_aware_datetime_becomes_local_naive(self):
        expected = datetime(2026, 10, 20, 15, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert parse_deadline("2026-10-20T15:30:00Z", NOW) == expected


class TestOtherInputs:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values_mean_no_deadline(self, value):
        assert parse_deadline(value, NOW) is None

    def test_datetime_passes_through(self):
        moment = datetime(2026, 11, 1, 12, 0)
        assert parse_deadline(moment, NOW) == moment

    def test_date_object_is_end_of_day(self):
        assert parse_deadline(date(2026, 11, 1), NOW) == datetime(2026, 11, 1, 23, 59)

    def test_free_text_date_via_dateutil(self):
        assert parse_deadline("20 October 2026", NOW) == datetime(2026, 10, 20, 23, 59)

    def test_unparseable_text_is_dropped(self):
        assert parse_deadline("whenever you get to it", NOW) is None


class TestHelpers:

    def test_to_local_naive_leaves_naive_values(self):
        moment = datetime(2026, 10, 20, 9, 0)
        assert to_local_naive(moment) is moment

    def test_to_local_naive_strips_tzinfo(self):
        aware = datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc)
        assert to_local_naive(aware).tzinfo is None

    def test_end_of_day(self):
        assert end_of_day(date(2026, 10, 20)) == datetime(2026, 10, 20, 23, 59)
