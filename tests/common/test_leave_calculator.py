from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from hrm_portal.common.leave_calculator import calculate_leave_days, is_half_day_boundary
from hrm_portal.core.exceptions import ValidationError
from hrm_portal.requests.service import leave_days_for


def test_single_weekend_day_is_free():
    # 2026-03-07 is a Saturday
    assert calculate_leave_days(datetime(2026, 3, 7, 8, 0), datetime(2026, 3, 7, 17, 0)) == 0


def test_same_day_morning_session_is_half_day():
    assert calculate_leave_days(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 2, 12, 0)) == 0.5


def test_same_day_afternoon_session_is_half_day():
    assert calculate_leave_days(datetime(2026, 3, 2, 13, 30), datetime(2026, 3, 2, 17, 30)) == 0.5


def test_same_day_across_lunch_is_full_day():
    assert calculate_leave_days(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 2, 17, 0)) == 1


def test_multi_week_range_counts_weekdays_only():
    # Monday 2026-03-02 morning .. Friday 2026-03-13 evening: two full work weeks
    assert calculate_leave_days(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 13, 17, 0)) == 10


def test_afternoon_start_and_morning_end_count_half():
    assert calculate_leave_days(datetime(2026, 3, 2, 13, 30), datetime(2026, 3, 3, 11, 0)) == 1


def test_range_over_weekend_skips_saturday_and_sunday():
    # Friday .. Monday
    assert calculate_leave_days(datetime(2026, 3, 6, 8, 0), datetime(2026, 3, 9, 17, 0)) == 2


def test_end_before_start_is_rejected():
    with pytest.raises(ValueError):
        calculate_leave_days(datetime(2026, 3, 3, 8, 0), datetime(2026, 3, 2, 8, 0))


def test_half_day_boundaries():
    assert is_half_day_boundary(time(13, 0)) is True
    assert is_half_day_boundary(time(12, 0)) is True
    assert is_half_day_boundary(time(12, 30)) is False


def test_leave_request_must_consume_at_least_half_a_day():
    with pytest.raises(ValidationError):
        leave_days_for(datetime(2026, 3, 7, 8, 0), datetime(2026, 3, 7, 17, 0))


def test_leave_request_longer_than_thirty_days_is_rejected():
    with pytest.raises(ValidationError):
        leave_days_for(datetime(2026, 3, 2, 8, 0), datetime(2026, 5, 29, 17, 0))


def test_utc_timestamps_are_judged_on_local_wall_clock(server_tz):
    # 01:00Z-10:00Z is Monday 08:00-17:00 at UTC+7
    start = datetime(2026, 3, 2, 1, 0, tzinfo=timezone.utc)
    end = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
    assert calculate_leave_days(start, end) == 1


def test_utc_friday_evening_is_a_local_saturday(server_tz):
    # 2026-03-06T18:00Z is Saturday 01:00 at UTC+7
    start = datetime(2026, 3, 6, 18, 0, tzinfo=timezone.utc)
    assert calculate_leave_days(start, start + timedelta(hours=9)) == 0


def test_mixed_offsets_and_naive_local_times(server_tz):
    plus7 = timezone(timedelta(hours=7))
    start = datetime(2026, 3, 2, 8, 0, tzinfo=plus7)
    assert calculate_leave_days(start, datetime(2026, 3, 3, 17, 0)) == 2


def test_half_day_boundary_uses_local_time(server_tz):
    # 06:00Z is 13:00 local
    assert is_half_day_boundary(datetime(2026, 3, 2, 6, 0, tzinfo=timezone.utc))
    assert not is_half_day_boundary(datetime(2026, 3, 2, 5, 30, tzinfo=timezone.utc))
