"""Suggested price and due date for renewing a member's memberships.

The desk pre-fills these values; staff can still override both before
submitting. The backend stays the authority on what is actually charged.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from ..core.constants import RENEWAL_DAYS_PER_MONTH
from .model import MemberMembership, MembershipPlan


def suggest_renewal_price(selected_plans: Iterable[MembershipPlan]) -> Decimal:
    total = sum((p.price for p in selected_plans), Decimal("0"))
    return total.quantize(Decimal("0.01"))


def suggest_renewal_due_date(
    active_memberships: Sequence[MemberMembership],
    selected_plans: Sequence[MembershipPlan],
    *,
    today: date,
) -> date:
    if not selected_plans:
        return today

    selected_ids = {p.plan_id for p in selected_plans}
    base = today
    for m in active_memberships:
        if m.plan_id in selected_ids and m.due_date and m.due_date > base:
            base = m.due_date

    longest = max([p.duration_months for p in selected_plans] + [1])
    return base + timedelta(days=longest * RENEWAL_DAYS_PER_MONTH)
