from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

import httpx

from .api.connection import ApiConfig, ApiConnection, TokenProvider
from .attendance.feed import VisitFeedRegistry
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.service import CheckInService
from .business.http_business_repository import HttpBusinessRepository
from .business.service import BusinessDashboardService
from .common.datetime_utils import business_tz
from .core.exceptions import ConfigurationError
from .core.constants import (
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_BUSINESS_TIMEZONE,
    DEFAULT_LEADERBOARD_LIMIT,
    FEEDBACK_DISMISS_SECONDS,
    REFRESH_INTERVAL_SECONDS,
    VISIT_END_HOUR,
    VISIT_START_HOUR,
)
from .members.http_member_repository import HttpIdentityRepository, HttpMembershipRepository
from .members.service import MemberService, MembershipService


@dataclass(frozen=True)
class Container:
    conn: ApiConnection
    business_tz: tzinfo

    identities_repo: HttpIdentityRepository
    memberships_repo: HttpMembershipRepository
    attendance_repo: HttpAttendanceRepository
    business_repo: HttpBusinessRepository

    visit_feeds: VisitFeedRegistry
    checkin_service: CheckInService
    membership_service: MembershipService
    member_service: MemberService
    business_service: BusinessDashboardService


def build_container(
    *,
    api_config: dict,
    token_provider: Optional[TokenProvider] = None,
    timezone_name: str = DEFAULT_BUSINESS_TIMEZONE,
    visit_hours: tuple[int, int] = (VISIT_START_HOUR, VISIT_END_HOUR),
    refresh_interval_seconds: int = REFRESH_INTERVAL_SECONDS,
    leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT,
    feedback_seconds: int = FEEDBACK_DISMISS_SECONDS,
    transport: Optional[httpx.BaseTransport] = None,
) -> Container:
    start_hour, end_hour = int(visit_hours[0]), int(visit_hours[1])
    if not (0 <= start_hour <= end_hour <= 23):
        raise ConfigurationError(
            f"VISIT_START_HOUR ({start_hour}) and VISIT_END_HOUR ({end_hour}) must satisfy 0 <= start <= end <= 23"
        )

    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout_seconds=float(api_config.get("timeout_seconds", DEFAULT_API_TIMEOUT_SECONDS)),
    )
    conn = ApiConnection(config, token_provider=token_provider, transport=transport)
    tz = business_tz(timezone_name)

    identities_repo = HttpIdentityRepository(conn)
    memberships_repo = HttpMembershipRepository(conn)
    attendance_repo = HttpAttendanceRepository(conn)
    business_repo = HttpBusinessRepository(conn)

    visit_feeds = VisitFeedRegistry(
        attendance_repo,
        tz=tz,
        refresh_interval_seconds=refresh_interval_seconds,
        leaderboard_limit=leaderboard_limit,
        start_hour=start_hour,
        end_hour=end_hour,
    )
    checkin_service = CheckInService(
        attendance_repo,
        identities_repo,
        visit_feeds,
        feedback_seconds=feedback_seconds,
    )
    membership_service = MembershipService(memberships_repo, tz=tz)
    member_service = MemberService(identities_repo, memberships_repo)
    business_service = BusinessDashboardService(business_repo, tz=tz)

    return Container(
        conn=conn,
        business_tz=tz,
        identities_repo=identities_repo,
        memberships_repo=memberships_repo,
        attendance_repo=attendance_repo,
        business_repo=business_repo,
        visit_feeds=visit_feeds,
        checkin_service=checkin_service,
        membership_service=membership_service,
        member_service=member_service,
        business_service=business_service,
    )
