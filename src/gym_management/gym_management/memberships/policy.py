"""Membership date arithmetic and status rules.

Pure functions only; the service layer decides when to persist the result.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..core.enums import DurationUnit, MembershipStatus
from ..users.model import Membership

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_plan_duration(text: Optional[str]) -> Tuple[int, DurationUnit]:
    """'3 Months' -> (3, MONTH); '1 Year' -> (1, YEAR); no known unit -> (1, MONTH)."""

    raw = (text or "").strip().lower()
    match = _LEADING_INT.match(raw)
    count = int(match.group(1)) if match else 1
    if count < 1:
        count = 1

    if "month" in raw:
        return count, DurationUnit.MONTH
    if "year" in raw:
        return count, DurationUnit.YEAR
    if "week" in raw:
        return count, DurationUnit.WEEK
    return 1, DurationUnit.MONTH


def add_duration(start: datetime, count: int, unit: DurationUnit) -> datetime:
    if unit == DurationUnit.WEEK:
        return start + relativedelta(weeks=count)
    if unit == DurationUnit.YEAR:
        return start + relativedelta(years=count)
    return start + relativedelta(months=count)


def compute_end_date(start: datetime, duration: Optional[str]) -> datetime:
    count, unit = parse_plan_duration(duration)
    return add_duration(start, count, unit)


def is_membership_active(membership: Optional[Membership], now: datetime) -> bool:
    if membership is None or membership.status != MembershipStatus.ACTIVE:
        return False
    return membership.end_date is None or now < membership.end_date


def days_until_expiry(membership: Optional[Membership], now: datetime) -> Optional[int]:
    if membership is None or membership.end_date is None:
        return None
    remaining = (membership.end_date - now).total_seconds() / 86400
    return max(0, math.ceil(remaining))
