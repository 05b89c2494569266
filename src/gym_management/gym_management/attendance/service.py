from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ADMIN_ATTENDANCE_LIMIT, DEFAULT_HISTORY_LIMIT, DEFAULT_STATS_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import (
    AttendanceListRow,
    AttendanceRecord,
    AttendanceSummary,
    MemberVisitStats,
    OverallVisitStats,
)
from .repository import AttendanceRepository
from .streak import calculate_streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceHistory:
    attendance: list[AttendanceRecord]
    stats: AttendanceSummary


@dataclass(frozen=True)
class AttendanceStats:
    stats: list[MemberVisitStats]
    overall_stats: OverallVisitStats


def duration_minutes(check_in: datetime, check_out: datetime) -> int:
    """Whole minutes between check-in and check-out, halves rounded up."""
    return int(math.floor((check_out - check_in).total_seconds() / 60 + 0.5))


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance entry not found")
        return record

    def _close(self, record: AttendanceRecord, check_out: datetime) -> AttendanceRecord:
        if check_out < record.check_in_time:
            raise ValidationError("Check-out time must be after check-in time")
        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out,
            duration_minutes=duration_minutes(record.check_in_time, check_out),
        )
        return self._require_record(record.attendance_id)

    def check_in(self, user: User, *, now: Optional[datetime] = None) -> AttendanceRecord:
        if not user.is_member:
            raise AuthorizationError("Only members can check in")

        now = now or now_local()
        today = now.date()

        if self._attendance.get_for_user_and_date(user.user_id, today):
            raise ValidationError("Already checked in today")

        attendance_id = self._attendance.create_checkin(user_id=user.user_id, work_date=today, check_in_time=now)
        logger.info("User %s checked in at %s", user.user_id, now.isoformat())
        return self._require_record(attendance_id)

    def check_out(self, user: User, *, now: Optional[datetime] = None) -> AttendanceRecord:
        if not user.is_member:
            raise AuthorizationError("Only members can check out")

        now = now or now_local()
        record = self._attendance.get_for_user_and_date(user.user_id, now.date())
        if not record or record.status != AttendanceStatus.CHECKED_IN:
            raise NotFoundError("No active check-in found for today")

        closed = self._close(record, now)
        logger.info("User %s checked out after %s minutes", user.user_id, closed.duration_minutes)
        return closed

    def today(self, user: User, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user.user_id, (now or now_local()).date())

    def history(
        self,
        *,
        actor: User,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
        now: Optional[datetime] = None,
    ) -> AttendanceHistory:
        if actor.user_id != int(user_id) and not actor.is_admin:
            raise AuthorizationError("Not authorized to view this attendance")

        today = (now or now_local()).date()
        records = list(
            self._attendance.list_for_user(int(user_id), start_date=start_date, end_date=end_date, limit=limit)
        )
        total_minutes = sum(r.duration_minutes or 0 for r in records)

        summary = AttendanceSummary(
            total_visits=len(records),
            total_hours=round(total_minutes / 60, 2),
            average_duration=round(total_minutes / len(records), 1) if records else 0.0,
            # Streak looks at all visits, not only the page that was returned.
            current_streak=calculate_streak(self._attendance.list_dates_for_user(int(user_id), until=today), today),
        )
        return AttendanceHistory(attendance=records, stats=summary)

    # Admin

    def list_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        limit: int = DEFAULT_ADMIN_ATTENDANCE_LIMIT,
    ) -> Sequence[AttendanceListRow]:
        return self._attendance.list_rows(start_date=start_date, end_date=end_date, user_id=user_id, limit=limit)

    def stats(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceStats:
        if start_date is None and end_date is None:
            start_date = (now or now_local()).date() - timedelta(days=DEFAULT_STATS_DAYS)

        rows = self._attendance.list_rows(start_date=start_date, end_date=end_date, limit=None)

        grouped: dict[int, list[AttendanceListRow]] = {}
        for row in rows:
            grouped.setdefault(row.record.user_id, []).append(row)

        per_member = [
            MemberVisitStats(
                user_id=uid,
                user_name=items[0].user_name,
                user_email=items[0].user_email,
                total_visits=len(items),
                total_hours=round(sum(i.record.duration_minutes or 0 for i in items) / 60, 2),
                last_visit=max(i.record.work_date for i in items),
            )
            for uid, items in grouped.items()
        ]
        per_member.sort(key=lambda s: (-s.total_visits, s.user_id))

        overall = OverallVisitStats(
            total_check_ins=len(rows),
            unique_members=len(per_member),
            average_visits_per_member=round(len(rows) / len(per_member), 2) if per_member else 0.0,
            total_hours=round(sum(s.total_hours for s in per_member), 2),
        )
        return AttendanceStats(stats=per_member, overall_stats=overall)

    def admin_check_in(
        self,
        *,
        user_id: Optional[int],
        work_date: Optional[date] = None,
        check_in_time: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if not user_id:
            raise ValidationError("User ID is required")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        now = now or now_local()
        check_in = check_in_time or now
        day = work_date or check_in.date()

        if self._attendance.get_for_user_and_date(user.user_id, day):
            raise ValidationError("User already checked in for this date")

        attendance_id = self._attendance.create_checkin(user_id=user.user_id, work_date=day, check_in_time=check_in)
        logger.info("Admin check-in for user %s on %s", user.user_id, day.isoformat())
        return self._require_record(attendance_id)

    def admin_check_out(
        self,
        *,
        attendance_id: Optional[int],
        check_out_time: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if not attendance_id:
            raise ValidationError("Attendance ID is required")
        record = self._require_record(int(attendance_id))
        if record.status == AttendanceStatus.CHECKED_OUT:
            raise ValidationError("Already checked out")
        return self._close(record, check_out_time or now or now_local())

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete_by_id(attendance_id):
            raise NotFoundError("Attendance entry not found")
