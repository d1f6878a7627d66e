from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest


@pytest.fixture
def mx_tz():
    return ZoneInfo("America/Mexico_City")


@pytest.fixture
def fixed_now():
    # 14:30 in Mexico City (UTC-6)
    return datetime(2026, 2, 1, 20, 30, 0, tzinfo=timezone.utc)
