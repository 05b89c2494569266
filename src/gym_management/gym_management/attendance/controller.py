from __future__ import annotations

from flask import Flask, request

from ..auth.guards import Guards, require_current_user
from ..common.datetime_utils import optional_date, optional_datetime
from ..common.http import json_body, ok
from ..common.serialization import to_jsonable
from ..common.validators import optional_positive_int, parse_positive_int
from ..container import Container
from ..core.constants import DEFAULT_ADMIN_ATTENDANCE_LIMIT, DEFAULT_HISTORY_LIMIT
from .model import AttendanceListRow


def _row_json(row: AttendanceListRow) -> dict:
    data = to_jsonable(row.record)
    data["user"] = {
        "user_id": row.record.user_id,
        "name": row.user_name,
        "email": row.user_email,
        "role": row.user_role,
    }
    return data


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    attendance = container.attendance_service

    # ---- Member ------------------------------------------------------------

    @app.post("/api/attendance/checkin", endpoint="attendance_checkin")
    @guards.require_member
    def attendance_checkin():
        return ok(attendance.check_in(require_current_user()), 201)

    @app.post("/api/attendance/checkout", endpoint="attendance_checkout")
    @guards.require_member
    def attendance_checkout():
        return ok(attendance.check_out(require_current_user()))

    @app.get("/api/attendance/today", endpoint="attendance_today")
    @guards.require_member
    def attendance_today():
        return ok(attendance.today(require_current_user()))

    @app.get("/api/attendance/user/<int:user_id>", endpoint="attendance_user")
    @guards.require_auth
    def attendance_user(user_id: int):
        history = attendance.history(
            actor=require_current_user(),
            user_id=user_id,
            start_date=optional_date(request.args.get("start_date")),
            end_date=optional_date(request.args.get("end_date")),
            limit=parse_positive_int(request.args.get("limit"), "limit", default=DEFAULT_HISTORY_LIMIT),
        )
        return ok(history)

    # ---- Admin -------------------------------------------------------------

    @app.get("/api/attendance", endpoint="attendance_list")
    @guards.require_admin
    def attendance_list():
        rows = attendance.list_all(
            start_date=optional_date(request.args.get("start_date")),
            end_date=optional_date(request.args.get("end_date")),
            user_id=optional_positive_int(request.args.get("user_id"), "user_id"),
            limit=parse_positive_int(request.args.get("limit"), "limit", default=DEFAULT_ADMIN_ATTENDANCE_LIMIT),
        )
        return ok([_row_json(r) for r in rows])

    @app.get("/api/attendance/stats", endpoint="attendance_stats")
    @guards.require_admin
    def attendance_stats():
        stats = attendance.stats(
            start_date=optional_date(request.args.get("start_date")),
            end_date=optional_date(request.args.get("end_date")),
        )
        return ok(stats)

    @app.post("/api/attendance/admin/checkin", endpoint="attendance_admin_checkin")
    @guards.require_admin
    def attendance_admin_checkin():
        data = json_body()
        record = attendance.admin_check_in(
            user_id=optional_positive_int(data.get("user_id"), "user_id"),
            work_date=optional_date(data.get("date")),
            check_in_time=optional_datetime(data.get("check_in_time")),
        )
        return ok(record, 201)

    @app.post("/api/attendance/admin/checkout", endpoint="attendance_admin_checkout")
    @guards.require_admin
    def attendance_admin_checkout():
        data = json_body()
        record = attendance.admin_check_out(
            attendance_id=optional_positive_int(data.get("attendance_id"), "attendance_id"),
            check_out_time=optional_datetime(data.get("check_out_time")),
        )
        return ok(record)

    @app.delete("/api/attendance/<int:attendance_id>", endpoint="attendance_delete")
    @guards.require_admin
    def attendance_delete(attendance_id: int):
        attendance.delete(attendance_id)
        return ok({"message": "Attendance entry deleted successfully"})
