from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Kind of person an identity code refers to."""

    MEMBER = "member"
    EMPLOYEE = "employee"


class CheckAction(str, Enum):
    """Which mutation a check-in resolution issued."""

    IN = "in"
    OUT = "out"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class FeedState(str, Enum):
    """Lifecycle of the same-day visit feed."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
