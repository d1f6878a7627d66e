from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from ..core.constants import FEEDBACK_DISMISS_SECONDS
from ..core.enums import CheckAction
from ..core.exceptions import NotFoundError, TerminalBusyError
from ..members.codes import format_code, parse_identifier, role_label
from ..members.repository import IdentityRepository
from .feed import VisitFeedRegistry
from .model import CheckInFeedback
from .repository import AttendanceRepository
from .visits import is_top_rank, leaderboard_entry

logger = logging.getLogger(__name__)


class CheckInService:
    """Toggle a person's presence at a branch from a typed code.

    Each resolution reads the open sessions fresh from the backend before
    deciding, then issues exactly one mutation: check-in when the person has
    no open record, check-out of that record otherwise. Nothing about who is
    inside is cached here. The read-then-mutate window is not atomic; the
    backend must reject a second open session for the same person.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        identities: IdentityRepository,
        feeds: VisitFeedRegistry,
        *,
        feedback_seconds: int = FEEDBACK_DISMISS_SECONDS,
    ):
        self._attendance = attendance
        self._identities = identities
        self._feeds = feeds
        self._feedback_seconds = int(feedback_seconds)
        self._busy: set[str] = set()
        self._busy_lock = threading.Lock()

    @contextmanager
    def _terminal(self, terminal_id: str) -> Iterator[None]:
        with self._busy_lock:
            if terminal_id in self._busy:
                raise TerminalBusyError("Espera a que termine el registro anterior.")
            self._busy.add(terminal_id)
        try:
            yield
        finally:
            with self._busy_lock:
                self._busy.discard(terminal_id)

    def resolve(self, raw: str, *, branch_id: str, terminal_id: str = "default") -> CheckInFeedback:
        # Parse first: an unreadable code never reaches the network.
        parsed = parse_identifier(raw)
        code = format_code(parsed.code, parsed.role)

        with self._terminal(terminal_id):
            identity = self._identities.find_by_code(branch_id=branch_id, role=parsed.role, code=parsed.code)
            if identity is None:
                raise NotFoundError(f"{role_label(parsed.role)} {code} no encontrado")

            open_records = self._attendance.list_open(branch_id)
            current = next((r for r in open_records if r.member_id == identity.identity_id), None)

            if current is None:
                action = CheckAction.IN
                record = self._attendance.check_in(branch_id=branch_id, member_id=identity.identity_id)
            else:
                action = CheckAction.OUT
                record = self._attendance.check_out(attendance_id=current.attendance_id)

            logger.info("Check-%s %s (%s) at branch %s", action.value, code, identity.identity_id, branch_id)

            feed = self._feeds.for_branch(branch_id)
            feed.refresh()
            entry = leaderboard_entry(feed.leaderboard, identity.identity_id)

        return CheckInFeedback(
            action=action,
            identity=identity,
            code=code,
            record=record,
            dismiss_after_seconds=self._feedback_seconds,
            position=entry.rank if entry else None,
            streak_days=entry.streak_days if entry else None,
            is_top=is_top_rank(entry.rank if entry else None),
        )
