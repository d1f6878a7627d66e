from __future__ import annotations

from typing import Any, Protocol


class BusinessRepository(Protocol):
    def get_dashboard(
        self,
        branch_id: str,
        *,
        inactive_days: int,
        popular_plans_limit: int,
        recent_payments_limit: int,
        inactive_members_limit: int,
    ) -> dict[str, Any]:
        raise NotImplementedError
