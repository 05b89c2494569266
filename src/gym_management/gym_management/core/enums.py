from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    VISITOR = "visitor"
    MEMBER = "member"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


MEMBER_ROLES = frozenset({Role.MEMBER, Role.ADMIN, Role.SUPER_ADMIN})
ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"


class DurationUnit(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class AttendanceStatus(str, Enum):
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"


class AccessLevel(str, Enum):
    """Who may read a workout or diet plan."""

    PUBLIC = "public"
    MEMBERS = "members"
    ASSIGNED = "assigned"


class PlanLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class DietType(str, Enum):
    VEG = "veg"
    NONVEG = "nonveg"
    KETO = "keto"
    WEIGHTLOSS = "weightloss"
    GAIN = "gain"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    RAZORPAY = "razorpay"
    MANUAL = "manual"
    GOOGLE_PAY = "google_pay"
    OTHER = "other"


class Mood(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    OKAY = "okay"
    POOR = "poor"
    TERRIBLE = "terrible"
