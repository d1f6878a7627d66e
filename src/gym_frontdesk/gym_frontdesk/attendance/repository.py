from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord, StreakLeaderboardItem


class AttendanceRepository(Protocol):
    def list_open(self, branch_id: str) -> Sequence[AttendanceRecord]:
        """Records without check-out, i.e. people currently inside."""

        raise NotImplementedError

    def list_for_date(self, branch_id: str, attendance_date: date, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def check_in(self, *, branch_id: str, member_id: str) -> AttendanceRecord:
        raise NotImplementedError

    def check_out(self, *, attendance_id: str) -> AttendanceRecord:
        raise NotImplementedError

    def streak_leaderboard(self, branch_id: str, *, limit: int) -> Sequence[StreakLeaderboardItem]:
        raise NotImplementedError
