from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.gym_frontdesk.gym_frontdesk.attendance.feed import VisitFeedRegistry
from src.gym_frontdesk.gym_frontdesk.attendance.model import AttendanceRecord, StreakLeaderboardItem
from src.gym_frontdesk.gym_frontdesk.attendance.service import CheckInService
from src.gym_frontdesk.gym_frontdesk.core.enums import CheckAction, FeedState, Role
from src.gym_frontdesk.gym_frontdesk.core.exceptions import (
    ApiError,
    IdentifierError,
    NotFoundError,
    TerminalBusyError,
)
from src.gym_frontdesk.gym_frontdesk.members.model import Identity


class InMemoryIdentities:
    def __init__(self, identities: list[Identity]):
        self._by_key = {(i.role, i.code): i for i in identities}
        self.calls: list[tuple] = []
        self.on_lookup = None

    def find_by_code(self, *, branch_id: str, role: Role, code: int) -> Optional[Identity]:
        self.calls.append((branch_id, role, code))
        if self.on_lookup:
            self.on_lookup()
        return self._by_key.get((role, code))


class InMemoryAttendance:
    def __init__(self, open_records=None, leaderboard=None):
        self.records: list[AttendanceRecord] = list(open_records or [])
        self.leaderboard = list(leaderboard or [])
        self.calls: list[tuple] = []
        self.fail_mutation: Optional[ApiError] = None
        self.fail_refresh: Optional[ApiError] = None
        self._id = 0

    def list_open(self, branch_id: str):
        self.calls.append(("list_open", branch_id))
        return [r for r in self.records if r.branch_id == branch_id and r.is_open]

    def list_for_date(self, branch_id: str, attendance_date: date, *, limit: int):
        self.calls.append(("list_for_date", branch_id, attendance_date))
        if self.fail_refresh:
            raise self.fail_refresh
        return [r for r in self.records if r.branch_id == branch_id]

    def check_in(self, *, branch_id: str, member_id: str) -> AttendanceRecord:
        self.calls.append(("check_in", branch_id, member_id))
        if self.fail_mutation:
            raise self.fail_mutation
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=f"att-new-{self._id}",
            branch_id=branch_id,
            member_id=member_id,
            check_in_time=datetime(2026, 2, 1, 20, 0, tzinfo=timezone.utc),
        )
        self.records.append(rec)
        return rec

    def check_out(self, *, attendance_id: str) -> AttendanceRecord:
        self.calls.append(("check_out", attendance_id))
        if self.fail_mutation:
            raise self.fail_mutation
        for idx, r in enumerate(self.records):
            if r.attendance_id == attendance_id:
                closed = AttendanceRecord(
                    attendance_id=r.attendance_id,
                    branch_id=r.branch_id,
                    member_id=r.member_id,
                    check_in_time=r.check_in_time,
                    check_out_time=datetime(2026, 2, 1, 21, 0, tzinfo=timezone.utc),
                )
                self.records[idx] = closed
                return closed
        raise ApiError("Asistencia no encontrada", status_code=404)

    def streak_leaderboard(self, branch_id: str, *, limit: int):
        self.calls.append(("streak_leaderboard", branch_id))
        return self.leaderboard[:limit]

    def mutations(self):
        return [c for c in self.calls if c[0] in {"check_in", "check_out"}]


MEMBER = Identity(identity_id="mem-310", code=310, role=Role.MEMBER, full_name="Merle Gasco", branch_id="b1")
EMPLOYEE = Identity(identity_id="emp-5", code=5, role=Role.EMPLOYEE, full_name="Andrea Romero", branch_id="b1")


def _open_record(rid: str, member_id: str) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=rid,
        branch_id="b1",
        member_id=member_id,
        check_in_time=datetime(2026, 2, 1, 18, 0, tzinfo=timezone.utc),
    )


def _service(attendance, identities):
    feeds = VisitFeedRegistry(attendance, tz=ZoneInfo("America/Mexico_City"))
    return CheckInService(attendance, identities, feeds, feedback_seconds=4), feeds


def test_member_without_open_record_is_checked_in_then_views_refresh():
    attendance = InMemoryAttendance()
    svc, feeds = _service(attendance, InMemoryIdentities([MEMBER, EMPLOYEE]))

    fb = svc.resolve("310", branch_id="b1")

    assert fb.action == CheckAction.IN
    assert fb.code == "310"
    assert fb.identity.full_name == "Merle Gasco"
    assert fb.dismiss_after_seconds == 4
    assert [c[0] for c in attendance.calls] == ["list_open", "check_in", "list_for_date", "streak_leaderboard"]
    assert attendance.mutations() == [("check_in", "b1", "mem-310")]
    assert feeds.for_branch("b1").state == FeedState.READY


def test_employee_with_open_record_is_checked_out():
    attendance = InMemoryAttendance(open_records=[_open_record("att-9", "emp-5")])
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER, EMPLOYEE]))

    fb = svc.resolve("e-5", branch_id="b1")

    assert fb.action == CheckAction.OUT
    assert fb.code == "E-5"
    assert fb.record.attendance_id == "att-9"
    assert attendance.mutations() == [("check_out", "att-9")]


def test_open_records_of_other_people_do_not_matter():
    attendance = InMemoryAttendance(open_records=[_open_record("att-1", "someone-else")])
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER]))

    fb = svc.resolve("310", branch_id="b1")

    assert fb.action == CheckAction.IN
    assert attendance.mutations() == [("check_in", "b1", "mem-310")]


def test_toggle_alternates_for_the_same_person():
    attendance = InMemoryAttendance()
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER]))

    actions = [svc.resolve("310", branch_id="b1").action for _ in range(3)]

    assert actions == [CheckAction.IN, CheckAction.OUT, CheckAction.IN]
    assert len(attendance.mutations()) == 3


def test_unparseable_input_makes_no_calls():
    attendance = InMemoryAttendance()
    identities = InMemoryIdentities([MEMBER])
    svc, _ = _service(attendance, identities)

    with pytest.raises(IdentifierError):
        svc.resolve("abc", branch_id="b1")

    assert identities.calls == []
    assert attendance.calls == []


def test_unknown_code_is_not_found_with_formatted_code():
    attendance = InMemoryAttendance()
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER]))

    with pytest.raises(NotFoundError) as exc:
        svc.resolve("E-77", branch_id="b1")

    assert "Empleado E-77" in str(exc.value)
    assert attendance.calls == []


def test_rejected_mutation_surfaces_server_text_without_refresh():
    attendance = InMemoryAttendance()
    attendance.fail_mutation = ApiError("Membresía vencida", status_code=400)
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER]))

    with pytest.raises(ApiError) as exc:
        svc.resolve("310", branch_id="b1")

    assert exc.value.message == "Membresía vencida"
    assert [c[0] for c in attendance.calls] == ["list_open", "check_in"]


def test_failed_refresh_keeps_successful_checkin():
    attendance = InMemoryAttendance()
    attendance.fail_refresh = ApiError("timeout")
    svc, feeds = _service(attendance, InMemoryIdentities([MEMBER]))

    fb = svc.resolve("310", branch_id="b1")

    assert fb.action == CheckAction.IN
    assert feeds.for_branch("b1").state == FeedState.ERROR


def test_feedback_includes_leaderboard_position():
    board = [
        StreakLeaderboardItem(member_id="x", member_name="Ana", month_visits=20, streak_days=18, rank=1),
        StreakLeaderboardItem(member_id="mem-310", member_name="Merle Gasco", month_visits=12, streak_days=9, rank=2),
    ]
    attendance = InMemoryAttendance(leaderboard=board)
    svc, _ = _service(attendance, InMemoryIdentities([MEMBER]))

    fb = svc.resolve("310", branch_id="b1")

    assert fb.position == 2
    assert fb.streak_days == 9
    assert fb.is_top is True


def test_second_submission_from_same_terminal_is_rejected_while_busy():
    attendance = InMemoryAttendance()
    identities = InMemoryIdentities([MEMBER, EMPLOYEE])
    svc, _ = _service(attendance, identities)
    seen: list[Exception] = []

    def resubmit():
        identities.on_lookup = None
        try:
            svc.resolve("E-5", branch_id="b1", terminal_id="desk-1")
        except TerminalBusyError as e:
            seen.append(e)

    identities.on_lookup = resubmit
    fb = svc.resolve("310", branch_id="b1", terminal_id="desk-1")

    assert fb.action == CheckAction.IN
    assert len(seen) == 1
    assert attendance.mutations() == [("check_in", "b1", "mem-310")]

    # the terminal is free again afterwards
    assert svc.resolve("E-5", branch_id="b1", terminal_id="desk-1").action == CheckAction.IN


def test_other_terminals_are_not_blocked():
    attendance = InMemoryAttendance()
    identities = InMemoryIdentities([MEMBER, EMPLOYEE])
    svc, _ = _service(attendance, identities)
    results = []

    def other_desk():
        identities.on_lookup = None
        results.append(svc.resolve("E-5", branch_id="b1", terminal_id="desk-2").action)

    identities.on_lookup = other_desk
    svc.resolve("310", branch_id="b1", terminal_id="desk-1")

    assert results == [CheckAction.IN]
