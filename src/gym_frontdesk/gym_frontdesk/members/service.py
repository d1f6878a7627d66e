from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Any, Optional, Sequence

from ..common.datetime_utils import business_today
from ..common.validators import require_money, require_non_empty
from ..core.exceptions import ValidationError
from .model import MemberRegistration, MembershipPlan, NewMember, RenewalQuote
from .renewal import suggest_renewal_due_date, suggest_renewal_price
from .repository import IdentityRepository, MembershipRepository

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(self, memberships: MembershipRepository, *, tz: tzinfo):
        self._memberships = memberships
        self._tz = tz

    def renewal_quote(
        self,
        member_id: str,
        *,
        branch_id: str,
        plan_ids: Optional[Sequence[str]] = None,
        now: datetime | None = None,
    ) -> RenewalQuote:
        """Pre-filled renewal values; defaults to the member's active plans."""

        memberships = self._memberships.list_member_memberships(member_id)
        active = [m for m in memberships if m.is_active]
        if plan_ids is None:
            plan_ids = [m.plan_id for m in active]

        wanted = list(dict.fromkeys(str(p) for p in plan_ids))
        plans = [p for p in self._memberships.list_plans(branch_id) if p.plan_id in wanted]
        today = business_today(self._tz, now=now)

        return RenewalQuote(
            member_id=member_id,
            plan_ids=tuple(wanted),
            price=suggest_renewal_price(plans),
            due_date=suggest_renewal_due_date(active, plans, today=today),
        )

    def renew(
        self,
        member_id: str,
        *,
        plan_ids: Sequence[str],
        payment_amount: Any,
        due_date: date | None,
    ) -> None:
        plan_ids = [str(p) for p in (plan_ids or []) if str(p).strip()]
        if not plan_ids:
            raise ValidationError("Selecciona al menos una membresía para renovar.")
        amount = require_money(payment_amount, "monto")
        if due_date is None:
            raise ValidationError("Selecciona una fecha de vencimiento.")

        self._memberships.renew(
            member_id=member_id,
            plan_ids=plan_ids,
            total_payment_amount=amount,
            due_date=due_date,
        )
        logger.info("Renewed %d membership(s) for member %s until %s", len(plan_ids), member_id, due_date)


class MemberService:
    """Member sign-up at the desk: plan catalog plus registration."""

    def __init__(self, identities: IdentityRepository, memberships: MembershipRepository):
        self._identities = identities
        self._memberships = memberships

    def list_plans(self, branch_id: str) -> Sequence[MembershipPlan]:
        return self._memberships.list_plans(branch_id)

    def register(
        self,
        *,
        branch_id: str,
        full_name: str | None,
        email: str | None = None,
        phone: str | None = None,
        plan_ids: Sequence[str] = (),
    ) -> MemberRegistration:
        name = require_non_empty(full_name or "", "Nombre completo")
        email = (email or "").strip() or None
        if email is not None and "@" not in email:
            raise ValidationError("Ingresa un email válido.")
        phone = (phone or "").strip() or None

        wanted = list(dict.fromkeys(str(p).strip() for p in (plan_ids or []) if str(p).strip()))
        plans: list[MembershipPlan] = []
        if wanted:
            catalog = {p.plan_id: p for p in self._memberships.list_plans(branch_id)}
            unknown = [p for p in wanted if p not in catalog]
            if unknown:
                raise ValidationError(f"Membresía no disponible en esta sucursal: {', '.join(unknown)}")
            plans = [catalog[p] for p in wanted]

        identity = self._identities.create_member(
            NewMember(
                full_name=name,
                branch_id=branch_id,
                email=email,
                phone=phone,
                plan_ids=tuple(wanted),
            )
        )
        logger.info("Registered member %s (%s) with %d plan(s)", identity.code, identity.identity_id, len(plans))
        return MemberRegistration(
            identity=identity,
            plans=tuple(plans),
            total_price=suggest_renewal_price(plans),
        )
