from datetime import datetime, timedelta

import pytest

from src.gym_management.gym_management.core.enums import DurationUnit, MembershipStatus
from src.gym_management.gym_management.memberships.policy import (
    compute_end_date,
    days_until_expiry,
    is_membership_active,
    parse_plan_duration,
)
from src.gym_management.gym_management.users.model import Membership


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3 Months", (3, DurationUnit.MONTH)),
        ("1 Month", (1, DurationUnit.MONTH)),
        ("1 Year", (1, DurationUnit.YEAR)),
        ("2 weeks", (2, DurationUnit.WEEK)),
        ("12 Months (1 Year)", (12, DurationUnit.MONTH)),
        ("1 Year (52 Weeks)", (1, DurationUnit.YEAR)),
        ("Month", (1, DurationUnit.MONTH)),
        ("Lifetime", (1, DurationUnit.MONTH)),
        ("10 days", (1, DurationUnit.MONTH)),
        ("", (1, DurationUnit.MONTH)),
        (None, (1, DurationUnit.MONTH)),
    ],
)
def test_parse_plan_duration(text, expected):
    assert parse_plan_duration(text) == expected


def test_end_date_adds_calendar_months_and_clamps_to_month_end():
    assert compute_end_date(datetime(2026, 1, 15, 10, 0), "3 Months") == datetime(2026, 4, 15, 10, 0)
    assert compute_end_date(datetime(2026, 1, 31, 10, 0), "1 Month") == datetime(2026, 2, 28, 10, 0)


def test_end_date_years_and_weeks():
    assert compute_end_date(datetime(2024, 2, 29), "1 Year") == datetime(2025, 2, 28)
    assert compute_end_date(datetime(2026, 3, 1, 8, 0), "2 Weeks") == datetime(2026, 3, 15, 8, 0)


def _membership(status=MembershipStatus.ACTIVE, end=None):
    return Membership(plan_id=1, plan_name="Pro", start_date=datetime(2026, 1, 1), end_date=end, status=status)


def test_active_only_when_status_active_and_before_end(fixed_now):
    assert is_membership_active(_membership(end=fixed_now + timedelta(days=1)), fixed_now) is True
    assert is_membership_active(_membership(end=fixed_now), fixed_now) is False
    assert is_membership_active(_membership(end=fixed_now - timedelta(seconds=1)), fixed_now) is False
    assert is_membership_active(_membership(MembershipStatus.CANCELLED, fixed_now + timedelta(days=5)), fixed_now) is False
    assert is_membership_active(_membership(MembershipStatus.PENDING, fixed_now + timedelta(days=5)), fixed_now) is False
    assert is_membership_active(None, fixed_now) is False


def test_active_without_end_date(fixed_now):
    assert is_membership_active(_membership(end=None), fixed_now) is True


def test_days_until_expiry_rounds_up_and_floors_at_zero(fixed_now):
    assert days_until_expiry(_membership(end=fixed_now + timedelta(hours=36)), fixed_now) == 2
    assert days_until_expiry(_membership(end=fixed_now + timedelta(days=7)), fixed_now) == 7
    assert days_until_expiry(_membership(end=fixed_now - timedelta(days=3)), fixed_now) == 0
    assert days_until_expiry(_membership(end=None), fixed_now) is None
    assert days_until_expiry(None, fixed_now) is None


def test_end_date_for_label_naming_two_units():
    assert compute_end_date(datetime(2026, 1, 1), "12 Months (1 Year)") == datetime(2027, 1, 1)
