from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def business_tz(name: str) -> ZoneInfo:
    """Resolve the configured reporting timezone (e.g. ``America/Mexico_City``)."""
    return ZoneInfo(name)


def now_utc() -> datetime:
    """Current aware UTC time; every "today" and "current hour" starts here."""
    return datetime.now(timezone.utc)


def to_business(value: datetime, tz: tzinfo) -> datetime:
    """Convert a timestamp into the business timezone.

    Naive values are treated as UTC, which is how the backend stores them.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def business_today(tz: tzinfo, *, now: Optional[datetime] = None) -> date:
    """Date at the front desk in the business timezone, never the server local date."""
    return to_business(now or now_utc(), tz).date()


def business_hour(value: datetime, tz: tzinfo) -> int:
    return to_business(value, tz).hour


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API into an aware datetime."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_api_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value[:10])


def format_api_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")
