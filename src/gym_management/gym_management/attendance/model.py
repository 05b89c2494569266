from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one gym visit (at most one per user per calendar day)."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    duration_minutes: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for the admin views (record joined with its user)."""

    record: AttendanceRecord
    user_name: Optional[str]
    user_email: Optional[str]
    user_role: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSummary:
    total_visits: int
    total_hours: float
    average_duration: float
    current_streak: int


@dataclass(frozen=True)
class MemberVisitStats:
    user_id: int
    user_name: Optional[str]
    user_email: Optional[str]
    total_visits: int
    total_hours: float
    last_visit: Optional[date]


@dataclass(frozen=True)
class OverallVisitStats:
    total_check_ins: int
    unique_members: int
    average_visits_per_member: float
    total_hours: float
