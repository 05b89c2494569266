from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards, current_user, require_current_user
from ..common.http import json_body, ok, query_flag
from ..common.serialization import to_jsonable
from ..container import Container
from .model import TransformationView


def _view_json(view: TransformationView) -> dict:
    data = to_jsonable(view.transformation)
    data["user"] = {
        "user_id": view.transformation.user_id,
        "name": view.user_name,
        "role": view.user_role,
        "member_since": to_jsonable(view.member_since),
    }
    return data


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    transformations = container.transformation_service

    @app.get("/api/transformations", endpoint="transformations_list")
    @guards.optional_auth
    def transformations_list():
        views = transformations.list_for(
            current_user(),
            include_pending=query_flag("include_pending"),
            mine=query_flag("mine"),
        )
        return ok([_view_json(v) for v in views])

    @app.post("/api/transformations", endpoint="transformations_submit")
    @guards.require_member
    def transformations_submit():
        data = json_body()
        t = transformations.submit(
            require_current_user(),
            before_image=data.get("before_image"),
            after_image=data.get("after_image"),
            story=data.get("story"),
        )
        return ok(t, 201)

    @app.put("/api/transformations/approve/<int:transformation_id>", endpoint="transformations_approve")
    @guards.require_admin
    def transformations_approve(transformation_id: int):
        data = json_body()
        return ok(transformations.approve(transformation_id, featured=bool(data.get("featured", False))))

    @app.delete("/api/transformations/<int:transformation_id>", endpoint="transformations_delete")
    @guards.require_auth
    def transformations_delete(transformation_id: int):
        transformations.delete(require_current_user(), transformation_id)
        return ok({"message": "Transformation removed"})
