from __future__ import annotations

import logging
import threading
from datetime import datetime, tzinfo
from typing import Any, Optional, Sequence

from ..common.datetime_utils import business_today, now_utc, to_business
from ..core.constants import (
    CLOCK_TICK_SECONDS,
    DEFAULT_DAY_ATTENDANCE_LIMIT,
    DEFAULT_LEADERBOARD_LIMIT,
    REFRESH_INTERVAL_SECONDS,
    VISIT_END_HOUR,
    VISIT_START_HOUR,
)
from ..core.enums import FeedState
from ..core.exceptions import ApiError
from .model import AttendanceRecord, StreakLeaderboardItem
from .repository import AttendanceRepository
from .visits import member_initials, summarize_visits

logger = logging.getLogger(__name__)

_WEEKDAYS_ES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]
_MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def clock(now: Optional[datetime], tz: tzinfo) -> dict:
    """Live clock/date payload; recomputed every tick, never fetches."""

    local = to_business(now or now_utc(), tz)
    return {
        "time": local.strftime("%H:%M:%S"),
        "date": local.strftime("%Y-%m-%d"),
        "display_date": f"{_WEEKDAYS_ES[local.weekday()]}, {local.day} de {_MONTHS_ES[local.month - 1]}",
        "tick_seconds": CLOCK_TICK_SECONDS,
    }


class VisitFeed:
    """Today's attendance list and streak leaderboard for one branch.

    States: LOADING until the first successful fetch, READY afterwards, ERROR
    when the latest fetch failed (previous data is kept and still served).
    Every refresh takes a sequence number; a response is dropped when a newer
    request has been issued meanwhile, so a slow answer never overwrites a
    fresher one.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        branch_id: str,
        tz: tzinfo,
        refresh_interval_seconds: int = REFRESH_INTERVAL_SECONDS,
        leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT,
        day_limit: int = DEFAULT_DAY_ATTENDANCE_LIMIT,
        start_hour: int = VISIT_START_HOUR,
        end_hour: int = VISIT_END_HOUR,
    ):
        self._attendance = attendance
        self.branch_id = branch_id
        self._tz = tz
        self._interval = int(refresh_interval_seconds)
        self._leaderboard_limit = int(leaderboard_limit)
        self._day_limit = int(day_limit)
        self._start_hour = int(start_hour)
        self._end_hour = int(end_hour)

        self._lock = threading.Lock()
        self._issued_seq = 0
        self.state = FeedState.LOADING
        self.error: Optional[str] = None
        self.records: tuple[AttendanceRecord, ...] = ()
        self.leaderboard: tuple[StreakLeaderboardItem, ...] = ()
        self.refreshed_at: Optional[datetime] = None

    def _begin(self) -> int:
        with self._lock:
            self._issued_seq += 1
            return self._issued_seq

    def _apply(
        self,
        seq: int,
        *,
        records: Sequence[AttendanceRecord],
        leaderboard: Sequence[StreakLeaderboardItem],
        at: datetime,
    ) -> bool:
        with self._lock:
            if seq != self._issued_seq:
                logger.debug("Dropping stale visit refresh #%s (latest #%s)", seq, self._issued_seq)
                return False
            self.records = tuple(records)
            self.leaderboard = tuple(leaderboard)
            self.refreshed_at = at
            self.state = FeedState.READY
            self.error = None
            return True

    def _fail(self, seq: int, message: str, *, at: datetime) -> bool:
        with self._lock:
            if seq != self._issued_seq:
                return False
            self.state = FeedState.ERROR
            self.error = message
            # Failed attempts also count toward the poll interval; retries stay manual.
            self.refreshed_at = at
            return True

    def refresh(self, *, now: Optional[datetime] = None) -> bool:
        """Re-fetch today's records and the leaderboard. Returns False if the response was dropped."""

        now = now or now_utc()
        seq = self._begin()
        today = business_today(self._tz, now=now)
        try:
            records = self._attendance.list_for_date(self.branch_id, today, limit=self._day_limit)
            leaderboard = self._attendance.streak_leaderboard(self.branch_id, limit=self._leaderboard_limit)
        except ApiError as e:
            logger.warning("Visit refresh for branch %s failed: %s", self.branch_id, e.message)
            self._fail(seq, e.message, at=now)
            return False
        return self._apply(seq, records=records, leaderboard=leaderboard, at=now)

    def is_due(self, now: datetime) -> bool:
        if self.refreshed_at is None:
            return True
        return (now - self.refreshed_at).total_seconds() >= self._interval

    def snapshot(self, *, now: Optional[datetime] = None) -> dict[str, Any]:
        now = now or now_utc()
        if self.is_due(now):
            self.refresh(now=now)

        with self._lock:
            records = self.records
            leaderboard = self.leaderboard
            state = self.state
            error = self.error

        summary = summarize_visits(
            records,
            tz=self._tz,
            now=now,
            start_hour=self._start_hour,
            end_hour=self._end_hour,
        )
        has_data = state == FeedState.READY or bool(records) or bool(leaderboard)

        return {
            "branch_id": self.branch_id,
            "state": state.value,
            "error": error,
            "has_data": has_data,
            "total_visits": summary.total_visits,
            "buckets": [{"hour": b.hour, "visits": b.visits, "label": b.label} for b in summary.buckets],
            "trend": {
                "current_hour": summary.trend.current_hour,
                "current_visits": summary.trend.current_visits,
                "previous_visits": summary.trend.previous_visits,
                "delta_pct": summary.trend.delta_pct,
                "direction": summary.trend.direction.value,
            },
            "chart_points": [{"hour": p.hour, "x": p.x, "y": p.y} for p in summary.chart_points],
            "leaderboard": [
                {
                    "member_id": item.member_id,
                    "member_name": item.member_name,
                    "initials": member_initials(item.member_name),
                    "month_visits": item.month_visits,
                    "streak_days": item.streak_days,
                    "rank": item.rank,
                }
                for item in leaderboard
            ],
            "clock": clock(now, self._tz),
            "refresh_interval_seconds": self._interval,
        }


class VisitFeedRegistry:
    """One feed per branch, created on first use."""

    def __init__(self, attendance: AttendanceRepository, **feed_options):
        self._attendance = attendance
        self._options = feed_options
        self._feeds: dict[str, VisitFeed] = {}
        self._lock = threading.Lock()

    def for_branch(self, branch_id: str) -> VisitFeed:
        with self._lock:
            feed = self._feeds.get(branch_id)
            if feed is None:
                feed = VisitFeed(self._attendance, branch_id=branch_id, **self._options)
                self._feeds[branch_id] = feed
            return feed
