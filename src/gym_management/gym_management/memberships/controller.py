from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards, require_current_user
from ..common.datetime_utils import optional_datetime
from ..common.http import json_body, ok
from ..common.validators import optional_positive_int
from ..container import Container
from ..users.model import public_view


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    memberships = container.membership_service

    @app.post("/api/membership/activate", endpoint="membership_activate")
    @guards.require_admin
    def membership_activate():
        data = json_body()
        user = memberships.activate(
            user_id=optional_positive_int(data.get("user_id"), "user_id"),
            plan_id=optional_positive_int(data.get("plan_id"), "plan_id"),
            payment_id=optional_positive_int(data.get("payment_id"), "payment_id"),
            start=optional_datetime(data.get("start_date")),
            end=optional_datetime(data.get("end_date")),
        )
        return ok({"message": "Membership activated successfully", "user": public_view(user)})

    @app.put("/api/membership/renew/<int:user_id>", endpoint="membership_renew")
    @guards.require_auth
    def membership_renew(user_id: int):
        data = json_body()
        user = memberships.renew(
            actor=require_current_user(),
            user_id=user_id,
            plan_id=optional_positive_int(data.get("plan_id"), "plan_id"),
            months=optional_positive_int(data.get("months"), "months"),
            start=optional_datetime(data.get("start_date")),
        )
        return ok({"message": "Membership renewed successfully", "user": public_view(user)})

    @app.get("/api/membership/status/<int:user_id>", endpoint="membership_status")
    @guards.require_auth
    def membership_status(user_id: int):
        return ok(memberships.status(actor=require_current_user(), user_id=user_id))

    @app.put("/api/membership/cancel/<int:user_id>", endpoint="membership_cancel")
    @guards.require_admin
    def membership_cancel(user_id: int):
        user = memberships.cancel(user_id=user_id)
        return ok({"message": "Membership cancelled successfully", "user": public_view(user)})
