from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards, current_user, require_current_user
from ..common.http import json_body, ok, query_flag
from ..container import Container
from .service import DietPlanService, WorkoutPlanService


def _register_tiered(
    app: Flask,
    guards: Guards,
    service: WorkoutPlanService | DietPlanService,
    *,
    prefix: str,
    name: str,
    list_key: str,
) -> None:
    def list_plans():
        listing = service.list_for(current_user(), preview_requested=query_flag("preview"))
        if listing.preview:
            return ok({"preview": True, list_key: listing.items})
        return ok(listing.items)

    def get_plan(plan_id: int):
        return ok(service.get_for(plan_id, current_user()))

    def create_plan():
        return ok(service.create(json_body(), actor=require_current_user()), 201)

    def update_plan(plan_id: int):
        return ok(service.update(plan_id, json_body()))

    def delete_plan(plan_id: int):
        service.delete(plan_id)
        return ok({"message": f"{service.kind.capitalize()} deleted successfully"})

    app.add_url_rule(prefix, f"{name}_list", guards.optional_auth(list_plans), methods=["GET"])
    app.add_url_rule(f"{prefix}/<int:plan_id>", f"{name}_get", guards.optional_auth(get_plan), methods=["GET"])
    app.add_url_rule(prefix, f"{name}_create", guards.require_admin(create_plan), methods=["POST"])
    app.add_url_rule(f"{prefix}/<int:plan_id>", f"{name}_update", guards.require_admin(update_plan), methods=["PUT"])
    app.add_url_rule(
        f"{prefix}/<int:plan_id>", f"{name}_delete", guards.require_admin(delete_plan), methods=["DELETE"]
    )


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    _register_tiered(app, guards, container.workout_service, prefix="/api/workouts", name="workouts", list_key="plans")
    _register_tiered(app, guards, container.diet_service, prefix="/api/diets", name="diets", list_key="diets")
