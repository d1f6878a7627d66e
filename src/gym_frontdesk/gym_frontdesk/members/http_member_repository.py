from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import api_request, fetchall, fetchone, payload_guard
from ..common.datetime_utils import format_api_date, parse_api_date
from ..core.constants import IDENTITY_LOOKUP_LIMIT
from ..core.enums import Role
from ..core.exceptions import ApiError
from .model import Identity, MemberMembership, MembershipPlan, NewMember
from .repository import IdentityRepository, MembershipRepository

_COLLECTION_BY_ROLE = {
    Role.MEMBER: "/members",
    Role.EMPLOYEE: "/employees",
}


def _money(value: Any) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))


def _to_identity(r: Dict[str, Any], role: Role) -> Identity:
    return Identity(
        identity_id=str(r["id"]),
        code=int(r["code"]),
        role=Role(r.get("role") or role.value),
        full_name=str(r.get("full_name") or ""),
        branch_id=r.get("branch_id"),
    )


class HttpIdentityRepository(IdentityRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def find_by_code(self, *, branch_id: str, role: Role, code: int) -> Optional[Identity]:
        path = _COLLECTION_BY_ROLE[role]
        body = api_request(
            self._conn,
            "GET",
            path,
            params={"branch_id": branch_id, "search": str(code), "limit": IDENTITY_LOOKUP_LIMIT},
        )
        # search is fuzzy on the backend (name, email, code); keep the exact code only.
        with payload_guard(path):
            for r in fetchall(body):
                if r.get("code") is None or int(r["code"]) != int(code):
                    continue
                return _to_identity(r, role)
        return None

    def create_member(self, member: NewMember) -> Identity:
        path = "/members"
        body = api_request(
            self._conn,
            "POST",
            path,
            json={
                "full_name": member.full_name,
                "email": member.email,
                "phone": member.phone,
                "branch_id": member.branch_id,
                "membership_plan_ids": list(member.plan_ids),
            },
        )
        r = fetchone(body)
        if not r:
            raise ApiError("Respuesta vacía del servidor")
        with payload_guard(path):
            return _to_identity(r, Role.MEMBER)


class HttpMembershipRepository(MembershipRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_member_memberships(self, member_id: str) -> Sequence[MemberMembership]:
        path = f"/members/{member_id}/memberships"
        rows = fetchall(api_request(self._conn, "GET", path))
        with payload_guard(path):
            return [self._to_membership(r) for r in rows]

    def list_plans(self, branch_id: str) -> Sequence[MembershipPlan]:
        path = "/membership-plans"
        rows = fetchall(api_request(self._conn, "GET", path, params={"branch_id": branch_id}))
        with payload_guard(path):
            return [
                MembershipPlan(
                    plan_id=str(r["id"]),
                    name=str(r.get("name") or ""),
                    price=_money(r.get("price")),
                    duration_months=int(r.get("duration_months") or 0),
                )
                for r in rows
            ]

    def renew(
        self,
        *,
        member_id: str,
        plan_ids: Sequence[str],
        total_payment_amount: Decimal,
        due_date: date,
    ) -> None:
        api_request(
            self._conn,
            "POST",
            f"/members/{member_id}/renew-memberships",
            json={
                "membership_plan_ids": list(plan_ids),
                "total_payment_amount": float(total_payment_amount),
                "due_date": f"{format_api_date(due_date)}T00:00:00",
            },
        )

    @staticmethod
    def _to_membership(r: Dict[str, Any]) -> MemberMembership:
        return MemberMembership(
            membership_id=str(r["id"]),
            plan_id=str(r["membership_plan_id"]),
            plan_name=str(r.get("membership_plan_name") or ""),
            plan_price=_money(r.get("membership_plan_price")),
            duration_months=int(r.get("duration_months") or 0),
            payment_amount=_money(r.get("payment_amount")),
            start_date=parse_api_date(r.get("start_date")),
            due_date=parse_api_date(r.get("due_date")),
            end_date=parse_api_date(r.get("end_date")),
            is_active=bool(r.get("is_active")),
        )
