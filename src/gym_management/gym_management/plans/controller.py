from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    plans = container.plan_service

    @app.get("/api/plans", endpoint="plans_list")
    def plans_list():
        return ok(plans.list_plans())

    @app.get("/api/plans/<int:plan_id>", endpoint="plans_get")
    def plans_get(plan_id: int):
        return ok(plans.get(plan_id))

    @app.post("/api/plans", endpoint="plans_create")
    @guards.require_admin
    def plans_create():
        return ok(plans.create(json_body()), 201)

    @app.put("/api/plans/<int:plan_id>", endpoint="plans_update")
    @guards.require_admin
    def plans_update(plan_id: int):
        return ok(plans.update(plan_id, json_body()))

    @app.delete("/api/plans/<int:plan_id>", endpoint="plans_delete")
    @guards.require_admin
    def plans_delete(plan_id: int):
        plans.delete(plan_id)
        return ok({"message": "Plan removed"})
