from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    ar.attendance_id, ar.user_id, ar.work_date, ar.check_in_time, ar.check_out_time,
    ar.duration_minutes, ar.status, ar.note
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    duration = r.get("duration_minutes")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        duration_minutes=int(duration) if duration is not None else None,
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.user_id=%s AND ar.work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_user(self, user_id, *, start_date=None, end_date=None, limit) -> Sequence[AttendanceRecord]:
        clauses = ["ar.user_id=%s"]
        params: list[object] = [int(user_id)]
        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE {' AND '.join(clauses)}
                ORDER BY ar.work_date DESC
                LIMIT %s
                """,
                tuple(params) + (int(limit),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_dates_for_user(self, user_id: int, *, until: date) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT work_date FROM attendance_records
                WHERE user_id=%s AND work_date <= %s
                ORDER BY work_date DESC
                """,
                (int(user_id), until),
            )
            return [r["work_date"] for r in fetchall(cur)]

    def create_checkin(self, *, user_id: int, work_date: date, check_in_time: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, check_in_time, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), work_date, check_in_time, AttendanceStatus.CHECKED_IN.value),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, duration_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, duration_minutes=%s, status=%s
                WHERE attendance_id=%s
                """,
                (check_out_time, int(duration_minutes), AttendanceStatus.CHECKED_OUT.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_rows(self, *, start_date=None, end_date=None, user_id=None, limit=None) -> Sequence[AttendanceListRow]:
        clauses: list[str] = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS user_name, u.email AS user_email, u.role AS user_role
                FROM attendance_records ar
                LEFT JOIN users u ON u.user_id = ar.user_id
                {where}
                ORDER BY ar.work_date DESC, ar.check_in_time DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [
                AttendanceListRow(
                    record=_row_to_record(r),
                    user_name=r.get("user_name"),
                    user_email=r.get("user_email"),
                    user_role=r.get("user_role"),
                )
                for r in fetchall(cur)
            ]

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
