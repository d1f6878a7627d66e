"""Same-day visit analytics for the front-desk view.

Everything here is a pure function of (records, now, timezone): rebuilding
from the same inputs yields identical results, so the feed can recompute
freely on each refresh.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import business_hour, now_utc
from ..core.constants import TOP_RANK_HIGHLIGHT, VISIT_END_HOUR, VISIT_START_HOUR
from ..core.enums import TrendDirection
from .model import AttendanceRecord, StreakLeaderboardItem


@dataclass(frozen=True)
class HourlyVisitPoint:
    hour: int
    visits: int
    label: str


@dataclass(frozen=True)
class VisitTrend:
    current_hour: int
    current_visits: int
    previous_visits: int
    delta_pct: int
    direction: TrendDirection


@dataclass(frozen=True)
class ChartPoint:
    hour: int
    x: float
    y: float


@dataclass(frozen=True)
class VisitSummary:
    buckets: tuple[HourlyVisitPoint, ...]
    total_visits: int
    trend: VisitTrend
    chart_points: tuple[ChartPoint, ...]


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def build_hourly_buckets(
    records: Iterable[AttendanceRecord],
    *,
    tz: tzinfo,
    start_hour: int = VISIT_START_HOUR,
    end_hour: int = VISIT_END_HOUR,
) -> tuple[HourlyVisitPoint, ...]:
    """Histogram of check-ins per business-timezone hour over [start_hour, end_hour]."""

    counts = {h: 0 for h in range(start_hour, end_hour + 1)}
    for r in records:
        hour = business_hour(r.check_in_time, tz)
        if hour in counts:
            counts[hour] += 1
    return tuple(HourlyVisitPoint(hour=h, visits=counts[h], label=hour_label(h)) for h in counts)


def clamp_hour(hour: int, start_hour: int, end_hour: int) -> int:
    return max(start_hour, min(end_hour, hour))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent_delta(current: int, previous: int) -> int:
    if previous == 0:
        return 0 if current == 0 else 100
    return round_half_up((current - previous) / previous * 100)


def direction_of(delta: int) -> TrendDirection:
    if delta > 0:
        return TrendDirection.UP
    if delta < 0:
        return TrendDirection.DOWN
    return TrendDirection.FLAT


def compute_trend(
    buckets: Sequence[HourlyVisitPoint],
    *,
    now: datetime,
    tz: tzinfo,
) -> VisitTrend:
    start_hour = buckets[0].hour
    end_hour = buckets[-1].hour
    current_hour = clamp_hour(business_hour(now, tz), start_hour, end_hour)

    idx = current_hour - start_hour
    current = buckets[idx].visits
    previous = buckets[max(idx - 1, 0)].visits
    delta = percent_delta(current, previous)

    return VisitTrend(
        current_hour=current_hour,
        current_visits=current,
        previous_visits=previous,
        delta_pct=delta,
        direction=direction_of(delta),
    )


def chart_points(
    buckets: Sequence[HourlyVisitPoint],
    *,
    current_hour: int,
    width: float = 100.0,
    height: float = 100.0,
) -> tuple[ChartPoint, ...]:
    """Polyline coordinates for the hours that already happened.

    x grows with the bucket index, y is inverted (SVG style) and normalized
    against the busiest hour; later hours stay in ``buckets`` but are not drawn.
    """

    if not buckets:
        return ()
    max_visits = max(max(b.visits for b in buckets), 1)
    step = width / (len(buckets) - 1) if len(buckets) > 1 else 0.0

    points = []
    for idx, b in enumerate(buckets):
        if b.hour > current_hour:
            break
        points.append(
            ChartPoint(
                hour=b.hour,
                x=round(idx * step, 2),
                y=round(height - (b.visits / max_visits) * height, 2),
            )
        )
    return tuple(points)


def summarize_visits(
    records: Sequence[AttendanceRecord],
    *,
    tz: tzinfo,
    now: Optional[datetime] = None,
    start_hour: int = VISIT_START_HOUR,
    end_hour: int = VISIT_END_HOUR,
) -> VisitSummary:
    now = now or now_utc()
    buckets = build_hourly_buckets(records, tz=tz, start_hour=start_hour, end_hour=end_hour)
    trend = compute_trend(buckets, now=now, tz=tz)
    return VisitSummary(
        buckets=buckets,
        total_visits=len(records),
        trend=trend,
        chart_points=chart_points(buckets, current_hour=trend.current_hour),
    )


def member_initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part)[:2].upper()


def leaderboard_entry(
    items: Sequence[StreakLeaderboardItem],
    member_id: str,
) -> Optional[StreakLeaderboardItem]:
    for item in items:
        if item.member_id == member_id:
            return item
    return None


def is_top_rank(rank: Optional[int]) -> bool:
    return rank is not None and rank <= TOP_RANK_HIGHLIGHT
