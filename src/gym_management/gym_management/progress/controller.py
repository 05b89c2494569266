from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards, require_current_user
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    progress = container.progress_service

    @app.post("/api/progress", endpoint="progress_create")
    @guards.require_member
    def progress_create():
        return ok(progress.create(require_current_user(), json_body()), 201)

    @app.get("/api/progress/<int:user_id>", endpoint="progress_list")
    @guards.require_auth
    def progress_list(user_id: int):
        return ok(progress.list_for(require_current_user(), user_id))

    @app.put("/api/progress/entry/<int:entry_id>", endpoint="progress_update")
    @guards.require_member
    def progress_update(entry_id: int):
        return ok(progress.update(require_current_user(), entry_id, json_body()))

    @app.delete("/api/progress/entry/<int:entry_id>", endpoint="progress_delete")
    @guards.require_member
    def progress_delete(entry_id: int):
        progress.delete(require_current_user(), entry_id)
        return ok({"message": "Progress entry deleted successfully"})
