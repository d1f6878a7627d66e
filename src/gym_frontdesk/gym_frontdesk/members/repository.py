from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Identity, MemberMembership, MembershipPlan, NewMember


class IdentityRepository(Protocol):
    """Repository interface for member/employee lookups.

    Note (DIP): services depend on this interface, not on the HTTP client.
    """

    def find_by_code(self, *, branch_id: str, role: Role, code: int) -> Optional[Identity]:
        raise NotImplementedError

    def create_member(self, member: NewMember) -> Identity:
        raise NotImplementedError


class MembershipRepository(Protocol):
    def list_member_memberships(self, member_id: str) -> Sequence[MemberMembership]:
        raise NotImplementedError

    def list_plans(self, branch_id: str) -> Sequence[MembershipPlan]:
        raise NotImplementedError

    def renew(
        self,
        *,
        member_id: str,
        plan_ids: Sequence[str],
        total_payment_amount,
        due_date,
    ) -> None:
        raise NotImplementedError
