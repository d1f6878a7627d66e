from __future__ import annotations

from typing import Any

from ..api.connection import ApiConnection
from ..api.http_base import api_request, fetchone
from .repository import BusinessRepository


class HttpBusinessRepository(BusinessRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def get_dashboard(
        self,
        branch_id: str,
        *,
        inactive_days: int,
        popular_plans_limit: int,
        recent_payments_limit: int,
        inactive_members_limit: int,
    ) -> dict[str, Any]:
        body = api_request(
            self._conn,
            "GET",
            "/business/dashboard",
            params={
                "branch_id": branch_id,
                "inactive_days": inactive_days,
                "popular_plans_limit": popular_plans_limit,
                "recent_payments_limit": recent_payments_limit,
                "inactive_members_limit": inactive_members_limit,
            },
        )
        return fetchone(body) or {}
