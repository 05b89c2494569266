from __future__ import annotations

from flask import Flask, current_app, jsonify, request

from ..auth.guards import TOKEN_COOKIE, Guards, require_current_user
from ..common.datetime_utils import optional_datetime
from ..common.http import json_body, ok, query_flag
from ..common.validators import optional_positive_int, parse_enum, parse_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import MembershipStatus, Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import CustomerFilter, public_view
from .service import AuthResult

RECENT_PAYMENTS = 10
_MEMBERSHIP_FILTERS = {"active", "expired", "cancelled", "pending", "none"}


def _with_session_cookie(result: AuthResult, status: int, max_age: int):
    resp = jsonify({**public_view(result.user), "token": result.token})
    resp.status_code = status
    resp.set_cookie(
        TOKEN_COOKIE,
        result.token,
        max_age=max_age,
        httponly=True,
        secure=not current_app.config.get("DEBUG", False),
        samesite="Strict",
    )
    return resp


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    max_age = container.tokens.max_age_seconds

    # ---- Account -----------------------------------------------------------

    @app.post("/api/users/register", endpoint="users_register")
    def users_register():
        data = json_body()
        result = container.auth_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            phone=data.get("phone", ""),
        )
        return _with_session_cookie(result, 201, max_age)

    @app.post("/api/users/login", endpoint="users_login")
    def users_login():
        data = json_body()
        result = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        return _with_session_cookie(result, 200, max_age)

    @app.post("/api/users/logout", endpoint="users_logout")
    def users_logout():
        resp = jsonify({"message": "Logged out"})
        resp.delete_cookie(TOKEN_COOKIE)
        return resp

    @app.get("/api/users/me", endpoint="users_me")
    @guards.require_auth
    def users_me():
        return ok(public_view(require_current_user()))

    @app.put("/api/users/profile", endpoint="users_profile")
    @guards.require_auth
    def users_profile():
        data = json_body()
        user = container.user_service.update_profile(
            require_current_user(),
            name=data.get("name"),
            phone=data.get("phone"),
            profile_image=data.get("profile_image"),
        )
        return ok(public_view(user))

    @app.post("/api/admin/auth/login", endpoint="admin_login")
    def admin_login():
        data = json_body()
        result = container.auth_service.admin_login(data.get("email", ""), data.get("password", ""))
        return _with_session_cookie(result, 200, max_age)

    # ---- Admin: customers --------------------------------------------------

    @app.get("/api/admin/customers", endpoint="admin_customers")
    @guards.require_admin
    def admin_customers():
        status = request.args.get("membership_status") or None
        if status is not None and status not in _MEMBERSHIP_FILTERS:
            raise ValidationError(f"Invalid membership_status: {status!r}")

        role = request.args.get("role") or None
        filters = CustomerFilter(
            role=parse_enum(Role, role, "role") if role else None,
            membership_status=status,
            expiring_soon=query_flag("expiring_soon"),
            search=(request.args.get("search") or "").strip() or None,
        )
        page = container.user_service.list_customers(
            filters,
            page=parse_positive_int(request.args.get("page"), "page", default=1),
            limit=parse_positive_int(request.args.get("limit"), "limit", default=DEFAULT_PAGE_SIZE),
        )
        return ok(
            {
                "customers": [public_view(u) for u in page.customers],
                "pagination": {
                    "page": page.page,
                    "limit": page.limit,
                    "total": page.total,
                    "pages": page.pages,
                },
            }
        )

    @app.get("/api/admin/customers/<int:user_id>", endpoint="admin_customer_detail")
    @guards.require_admin
    def admin_customer_detail(user_id: int):
        customer = container.user_service.get(user_id)
        payments = container.payment_service.list_for_user(user_id, limit=RECENT_PAYMENTS)
        return ok({"customer": public_view(customer), "payments": payments})

    @app.get("/api/admin/customers/<int:user_id>/payments", endpoint="admin_customer_payments")
    @guards.require_admin
    def admin_customer_payments(user_id: int):
        container.user_service.get(user_id)
        return ok(container.payment_service.list_for_user(user_id))

    @app.put("/api/admin/customers/<int:user_id>/update-role", endpoint="admin_customer_role")
    @guards.require_admin
    def admin_customer_role(user_id: int):
        data = json_body()
        user = container.user_service.update_role(
            actor=require_current_user(),
            user_id=user_id,
            role=parse_enum(Role, data.get("role"), "role"),
        )
        return ok(public_view(user))

    @app.put("/api/admin/customers/<int:user_id>/status", endpoint="admin_customer_status")
    @guards.require_admin
    def admin_customer_status(user_id: int):
        data = json_body()
        if not isinstance(data.get("is_active"), bool):
            raise ValidationError("is_active must be true or false")
        user = container.user_service.set_active(
            actor=require_current_user(),
            user_id=user_id,
            is_active=data["is_active"],
        )
        return ok(public_view(user))

    @app.put("/api/admin/customers/<int:user_id>/notes", endpoint="admin_customer_notes")
    @guards.require_admin
    def admin_customer_notes(user_id: int):
        data = json_body()
        user = container.user_service.update_notes(user_id=user_id, notes=data.get("notes") or "")
        return ok(public_view(user))

    @app.put("/api/admin/customers/<int:user_id>/membership", endpoint="admin_customer_membership")
    @guards.require_admin
    def admin_customer_membership(user_id: int):
        data = json_body()
        status = data.get("status")
        user = container.membership_service.override(
            user_id=user_id,
            plan_id=optional_positive_int(data.get("plan_id"), "plan_id"),
            start=optional_datetime(data.get("start_date")),
            end=optional_datetime(data.get("end_date")),
            status=parse_enum(MembershipStatus, status, "status") if status else None,
        )
        return ok(public_view(user))

    @app.delete("/api/admin/customers/<int:user_id>", endpoint="admin_customer_delete")
    @guards.require_admin
    def admin_customer_delete(user_id: int):
        container.user_service.delete_customer(actor=require_current_user(), user_id=user_id)
        return ok({"message": "Customer deleted successfully"})
