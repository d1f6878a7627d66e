from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from ..common.datetime_utils import parse_api_datetime, to_business
from .repository import BusinessRepository

_SHORT_MONTHS_ES = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]


def format_trend(value: float) -> str:
    """``12.46`` -> ``"+12.5%"``, ``-3.0`` -> ``"-3%"``, ``0`` -> ``"0%"``."""

    rounded = math.floor(float(value) * 10 + 0.5) / 10
    text = str(int(rounded)) if rounded == int(rounded) else str(rounded)
    return f"{'+' if rounded > 0 else ''}{text}%"


def format_currency(amount: Any) -> str:
    whole = Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if whole < 0 else ""
    return f"{sign}${abs(int(whole)):,}"


def format_count(value: Any) -> str:
    return f"{int(value or 0):,}"


def format_short_date(iso: Optional[str], tz: tzinfo) -> str:
    parsed = parse_api_datetime(iso)
    if parsed is None:
        return "Sin visitas"
    local = to_business(parsed, tz)
    return f"{local.day:02d} {_SHORT_MONTHS_ES[local.month - 1]}"


@dataclass(frozen=True)
class DashboardData:
    generated_at: Optional[str]
    kpis: list[dict]
    membership_summary: list[dict]
    membership_total: int
    weekly_attendance: list[dict]
    attendance_scale: int
    popular_plans: list[dict]
    recent_payments: list[dict]
    inactive_members: list[dict]


class BusinessDashboardService:
    def __init__(
        self,
        business: BusinessRepository,
        *,
        tz: tzinfo,
        inactive_days: int = 30,
        popular_plans_limit: int = 4,
        recent_payments_limit: int = 5,
        inactive_members_limit: int = 5,
    ):
        self._business = business
        self._tz = tz
        self._inactive_days = inactive_days
        self._popular_plans_limit = popular_plans_limit
        self._recent_payments_limit = recent_payments_limit
        self._inactive_members_limit = inactive_members_limit

    def build(self, branch_id: str) -> DashboardData:
        raw = self._business.get_dashboard(
            branch_id,
            inactive_days=self._inactive_days,
            popular_plans_limit=self._popular_plans_limit,
            recent_payments_limit=self._recent_payments_limit,
            inactive_members_limit=self._inactive_members_limit,
        )
        k = raw.get("kpis") or {}

        kpis = [
            self._kpi("Ingresos del Mes", format_currency(k.get("month_revenue")), k.get("month_revenue_change_pct")),
            self._kpi(
                "Miembros Activos",
                format_count(k.get("active_members")),
                k.get("active_members_change_pct"),
                subtitle=f"de {format_count(k.get('total_members'))} totales",
            ),
            self._kpi(
                "Nuevos Registros",
                format_count(k.get("new_registrations")),
                k.get("new_registrations_change_pct"),
                subtitle="este mes",
            ),
            self._kpi(
                "Tasa de Retencion",
                f"{math.floor(float(k.get('retention_rate_pct') or 0) + 0.5)}%",
                k.get("retention_rate_change_pct"),
                subtitle="vs mes anterior",
            ),
        ]

        s = raw.get("membership_summary") or {}
        summary = [
            {"label": "Activas", "count": int(s.get("active") or 0)},
            {"label": "Por vencer (7 dias)", "count": int(s.get("expiring_7_days") or 0)},
            {"label": "Vencidas", "count": int(s.get("overdue") or 0)},
            {"label": "Canceladas", "count": int(s.get("canceled") or 0)},
        ]

        weekly = [
            {"date": d.get("date"), "day_label": d.get("day_label"), "visits": int(d.get("visits") or 0)}
            for d in raw.get("weekly_attendance") or []
        ]

        popular = [
            {
                "plan_id": p.get("plan_id"),
                "plan_name": p.get("plan_name"),
                "members": int(p.get("members") or 0),
                "pct": p.get("pct") or 0,
                "revenue": format_currency(p.get("revenue")),
            }
            for p in raw.get("popular_plans") or []
        ]

        payments = [
            {
                "membership_id": p.get("membership_id"),
                "member_name": p.get("member_name"),
                "plan_name": p.get("plan_name"),
                "amount": format_currency(p.get("amount")),
                "payment_date": format_short_date(p.get("payment_date"), self._tz),
            }
            for p in raw.get("recent_payments") or []
        ]

        inactive = [
            {
                "member_id": m.get("member_id"),
                "member_name": m.get("member_name"),
                "last_visit": format_short_date(m.get("last_visit"), self._tz),
                "membership_name": m.get("membership_name") or "-",
                "days_away": int(m.get("days_away") or 0),
            }
            for m in raw.get("inactive_members") or []
        ]

        return DashboardData(
            generated_at=raw.get("generated_at"),
            kpis=kpis,
            membership_summary=summary,
            membership_total=sum(x["count"] for x in summary),
            weekly_attendance=weekly,
            attendance_scale=max([1] + [d["visits"] for d in weekly]),
            popular_plans=popular,
            recent_payments=payments,
            inactive_members=inactive,
        )

    @staticmethod
    def _kpi(label: str, value: str, change_pct: Any, *, subtitle: Optional[str] = None) -> dict:
        change = float(change_pct or 0)
        return {
            "label": label,
            "value": value,
            "subtitle": subtitle,
            "trend": format_trend(change),
            "positive": change >= 0,
        }
