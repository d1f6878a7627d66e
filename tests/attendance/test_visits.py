from __future__ import annotations

from datetime import datetime, timezone

from src.gym_frontdesk.gym_frontdesk.attendance.model import AttendanceRecord
from src.gym_frontdesk.gym_frontdesk.attendance.visits import (
    HourlyVisitPoint,
    build_hourly_buckets,
    chart_points,
    compute_trend,
    member_initials,
    percent_delta,
    summarize_visits,
)
from src.gym_frontdesk.gym_frontdesk.core.enums import TrendDirection


def _record(rid: str, utc_hour: int, utc_minute: int = 0, *, day: int = 1) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=rid,
        branch_id="b1",
        member_id=f"m-{rid}",
        check_in_time=datetime(2026, 2, day, utc_hour, utc_minute, tzinfo=timezone.utc),
    )


def _buckets(counts: dict[int, int]) -> tuple[HourlyVisitPoint, ...]:
    return tuple(HourlyVisitPoint(hour=h, visits=counts.get(h, 0), label=f"{h:02d}:00") for h in range(5, 24))


def test_buckets_cover_closed_hour_range(mx_tz):
    buckets = build_hourly_buckets([], tz=mx_tz)
    assert [b.hour for b in buckets] == list(range(5, 24))
    assert all(b.visits == 0 for b in buckets)
    assert buckets[0].label == "05:00"


def test_checkin_hour_uses_business_timezone(mx_tz):
    # 20:10 UTC is 14:10 in Mexico City
    buckets = build_hourly_buckets([_record("1", 20, 10)], tz=mx_tz)
    by_hour = {b.hour: b.visits for b in buckets}
    assert by_hour[14] == 1
    assert by_hour[20] == 0
    assert sum(by_hour.values()) == 1


def test_out_of_range_hours_are_excluded_but_late_hour_counts(mx_tz):
    early = _record("1", 9)  # 03:00 local
    late = _record("2", 5, 30, day=2)  # 23:30 local on Feb 1
    buckets = build_hourly_buckets([early, late], tz=mx_tz)
    by_hour = {b.hour: b.visits for b in buckets}
    assert sum(by_hour.values()) == 1
    assert by_hour[23] == 1


def test_total_visits_is_unfiltered(mx_tz, fixed_now):
    records = [_record("1", 9), _record("2", 20), _record("3", 20, 45)]
    summary = summarize_visits(records, tz=mx_tz, now=fixed_now)
    assert summary.total_visits == 3
    assert sum(b.visits for b in summary.buckets) == 2


def test_histogram_is_pure(mx_tz):
    records = [_record(str(i), 12 + i % 8, i) for i in range(20)]
    assert build_hourly_buckets(records, tz=mx_tz) == build_hourly_buckets(records, tz=mx_tz)


def test_percent_delta_rules():
    assert percent_delta(0, 0) == 0
    assert percent_delta(3, 0) == 100
    assert percent_delta(5, 10) == -50
    assert percent_delta(9, 8) == 13


def test_trend_directions(mx_tz, fixed_now):
    flat = compute_trend(_buckets({}), now=fixed_now, tz=mx_tz)
    assert (flat.delta_pct, flat.direction) == (0, TrendDirection.FLAT)

    up = compute_trend(_buckets({14: 3}), now=fixed_now, tz=mx_tz)
    assert up.current_hour == 14
    assert (up.current_visits, up.previous_visits) == (3, 0)
    assert (up.delta_pct, up.direction) == (100, TrendDirection.UP)

    down = compute_trend(_buckets({13: 10, 14: 5}), now=fixed_now, tz=mx_tz)
    assert (down.delta_pct, down.direction) == (-50, TrendDirection.DOWN)


def test_trend_clamps_before_opening_hour(mx_tz):
    # 02:00 local clamps to the first bucket, which is its own previous bucket
    now = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)
    trend = compute_trend(_buckets({5: 4, 6: 1}), now=now, tz=mx_tz)
    assert trend.current_hour == 5
    assert trend.current_visits == 4
    assert trend.previous_visits == 4
    assert trend.direction == TrendDirection.FLAT


def test_chart_points_stop_at_current_hour():
    buckets = _buckets({5: 2, 6: 4, 7: 1, 20: 9})
    points = chart_points(buckets, current_hour=7, width=180, height=100)
    assert [p.hour for p in points] == [5, 6, 7]
    assert points[0].x == 0
    assert points[1].x == 10
    # normalized against the busiest bucket of the whole day (9)
    assert points[1].y == round(100 - 4 / 9 * 100, 2)


def test_chart_points_with_no_visits_sit_on_baseline():
    points = chart_points(_buckets({}), current_hour=8, height=50)
    assert len(points) == 4
    assert all(p.y == 50 for p in points)


def test_member_initials():
    assert member_initials("Ana García") == "AG"
    assert member_initials("merle berenice gasco") == "MB"
    assert member_initials("") == ""
