from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class ParsedIdentifier:
    """What a person typed at the desk, after normalization."""

    role: Role
    code: int


@dataclass(frozen=True)
class Identity:
    """Domain entity: lookup result for a member or an employee.

    Owned by the backend; the front desk only reads it to turn a human code
    into an id and to format the code back for display.
    """

    identity_id: str
    code: int
    role: Role
    full_name: str
    branch_id: Optional[str] = None


@dataclass(frozen=True)
class MembershipPlan:
    plan_id: str
    name: str
    price: Decimal
    duration_months: int


@dataclass(frozen=True)
class MemberMembership:
    membership_id: str
    plan_id: str
    plan_name: str
    plan_price: Decimal
    duration_months: int
    payment_amount: Decimal
    start_date: date
    due_date: date
    end_date: Optional[date]
    is_active: bool


@dataclass(frozen=True)
class RenewalQuote:
    """Suggested values pre-filled in the renewal form."""

    member_id: str
    plan_ids: tuple[str, ...]
    price: Decimal
    due_date: date


@dataclass(frozen=True)
class NewMember:
    """Registration form after validation; the backend assigns id and code."""

    full_name: str
    branch_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    plan_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class MemberRegistration:
    identity: Identity
    plans: tuple[MembershipPlan, ...]
    total_price: Decimal
