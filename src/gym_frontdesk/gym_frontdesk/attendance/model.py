from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CheckAction
from ..members.model import Identity


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one visit session at a branch.

    A record without ``check_out_time`` is open: the person is inside. The
    backend keeps at most one open record per (branch, person).
    """

    attendance_id: str
    branch_id: str
    member_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None


@dataclass(frozen=True)
class StreakLeaderboardItem:
    """Read-model computed by the backend for the monthly streak board."""

    member_id: str
    member_name: str
    month_visits: int
    streak_days: int
    rank: int


@dataclass(frozen=True)
class CheckInFeedback:
    """Transient confirmation shown after a check-in or check-out."""

    action: CheckAction
    identity: Identity
    code: str
    record: AttendanceRecord
    dismiss_after_seconds: int
    position: Optional[int] = None
    streak_days: Optional[int] = None
    is_top: bool = False
