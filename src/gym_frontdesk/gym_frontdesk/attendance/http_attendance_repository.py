from __future__ import annotations

from datetime import date
from typing import Any, Dict, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import api_request, fetchall, fetchone, payload_guard
from ..common.datetime_utils import format_api_date, parse_api_datetime
from ..core.exceptions import ApiError
from .model import AttendanceRecord, StreakLeaderboardItem
from .repository import AttendanceRepository


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_open(self, branch_id: str) -> Sequence[AttendanceRecord]:
        path = "/attendances/current"
        body = api_request(self._conn, "GET", path, params={"branch_id": branch_id})
        with payload_guard(path):
            return [self._to_record(r) for r in fetchall(body)]

    def list_for_date(self, branch_id: str, attendance_date: date, *, limit: int) -> Sequence[AttendanceRecord]:
        path = "/attendances"
        body = api_request(
            self._conn,
            "GET",
            path,
            params={
                "branch_id": branch_id,
                "attendance_date": format_api_date(attendance_date),
                "limit": int(limit),
            },
        )
        with payload_guard(path):
            return [self._to_record(r) for r in fetchall(body)]

    def check_in(self, *, branch_id: str, member_id: str) -> AttendanceRecord:
        path = "/attendances/check-in"
        body = api_request(
            self._conn,
            "POST",
            path,
            json={"branch_id": branch_id, "member_id": member_id},
        )
        return self._require_record(body, path)

    def check_out(self, *, attendance_id: str) -> AttendanceRecord:
        path = f"/attendances/{attendance_id}/check-out"
        body = api_request(self._conn, "POST", path, json={})
        return self._require_record(body, path)

    def streak_leaderboard(self, branch_id: str, *, limit: int) -> Sequence[StreakLeaderboardItem]:
        path = "/attendances/leaderboard/streak"
        body = api_request(
            self._conn,
            "GET",
            path,
            params={"branch_id": branch_id, "limit": int(limit)},
        )
        with payload_guard(path):
            return [
                StreakLeaderboardItem(
                    member_id=str(r["member_id"]),
                    member_name=str(r.get("member_name") or ""),
                    month_visits=int(r.get("month_visits") or 0),
                    streak_days=int(r.get("streak_days") or 0),
                    rank=int(r.get("rank") or idx + 1),
                )
                for idx, r in enumerate(fetchall(body))
            ]

    def _require_record(self, body: Any, path: str) -> AttendanceRecord:
        r = fetchone(body)
        if not r:
            raise ApiError("Respuesta vacía del servidor")
        with payload_guard(path):
            return self._to_record(r)

    @staticmethod
    def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
        check_in_time = parse_api_datetime(r["check_in_time"])
        if check_in_time is None:
            raise ValueError("attendance row without check_in_time")
        return AttendanceRecord(
            attendance_id=str(r["id"]),
            branch_id=str(r.get("branch_id") or ""),
            member_id=str(r["member_id"]),
            check_in_time=check_in_time,
            check_out_time=parse_api_datetime(r.get("check_out_time")),
        )
