from __future__ import annotations

from zoneinfo import ZoneInfo

from src.gym_frontdesk.gym_frontdesk.business.service import (
    BusinessDashboardService,
    format_currency,
    format_trend,
)


class FakeBusinessRepo:
    def __init__(self, payload):
        self._payload = payload
        self.last_args = None

    def get_dashboard(self, branch_id, **kwargs):
        self.last_args = {"branch_id": branch_id, **kwargs}
        return self._payload


def test_format_trend():
    assert format_trend(12.46) == "+12.5%"
    assert format_trend(-3.0) == "-3%"
    assert format_trend(0) == "0%"
    assert format_trend(8) == "+8%"


def test_format_currency():
    assert format_currency(42500) == "$42,500"
    assert format_currency(1999.5) == "$2,000"
    assert format_currency(None) == "$0"


def test_dashboard_cards_and_lists():
    payload = {
        "generated_at": "2026-02-01T20:00:00Z",
        "kpis": {
            "month_revenue": 42500,
            "month_revenue_change_pct": 8.04,
            "active_members": 1204,
            "total_members": 1500,
            "active_members_change_pct": -2.5,
            "new_registrations": 31,
            "new_registrations_change_pct": 0,
            "retention_rate_pct": 80.6,
            "retention_rate_change_pct": 1.25,
        },
        "membership_summary": {"active": 10, "expiring_7_days": 2, "overdue": 1, "canceled": 3},
        "weekly_attendance": [{"date": "2026-01-26", "day_label": "lun", "visits": 40}],
        "popular_plans": [],
        "recent_payments": [
            {"membership_id": "mm-1", "member_name": "Ana", "plan_name": "Mensual", "amount": 450, "payment_date": "2026-02-01T02:00:00Z"}
        ],
        "inactive_members": [
            {"member_id": "m-9", "member_name": "Luis", "last_visit": None, "membership_name": None, "days_away": 45}
        ],
    }
    repo = FakeBusinessRepo(payload)
    data = BusinessDashboardService(repo, tz=ZoneInfo("America/Mexico_City")).build("b1")

    assert repo.last_args["inactive_days"] == 30
    assert [k["value"] for k in data.kpis] == ["$42,500", "1,204", "31", "81%"]
    assert data.kpis[0]["trend"] == "+8%"
    assert data.kpis[1]["positive"] is False
    assert data.kpis[1]["subtitle"] == "de 1,500 totales"
    assert data.membership_total == 16
    assert data.attendance_scale == 40
    # 02:00 UTC on Feb 1 is Jan 31 in Mexico City
    assert data.recent_payments[0]["payment_date"] == "31 ene"
    assert data.inactive_members[0]["last_visit"] == "Sin visitas"
