from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import AccessLevel, DietType, PlanLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, placeholders
from .model import DietPlan, Exercise, Meal, WorkoutPlan
from .repository import ContentRepository


class _MySQLContentRepository:
    """Shared CRUD for the two plan tables; subclasses map rows and columns."""

    table = ""
    columns: tuple[str, ...] = ()

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _from_row(self, r: dict) -> Any:
        raise NotImplementedError

    def _values(self, plan: Any) -> tuple:
        raise NotImplementedError

    def _select(self) -> str:
        return f"SELECT plan_id, {', '.join(self.columns)}, created_at FROM {self.table}"

    def list_all(self) -> Sequence[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._select()} ORDER BY created_at DESC, plan_id DESC")
            return [self._from_row(r) for r in fetchall(cur)]

    def get_by_id(self, plan_id: int) -> Optional[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._select()} WHERE plan_id=%s", (int(plan_id),))
            r = fetchone(cur)
            return self._from_row(r) if r else None

    def create(self, plan: Any) -> int:
        cols = ", ".join(self.columns)
        marks = placeholders(len(self.columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO {self.table}({cols}) VALUES({marks})", self._values(plan))
            return int(cur.lastrowid)

    def update(self, plan: Any) -> bool:
        assignments = ", ".join(f"{c}=%s" for c in self.columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {self.table} SET {assignments} WHERE plan_id=%s",
                self._values(plan) + (int(plan.plan_id),),
            )
            return cur.rowcount >= 0

    def delete_by_id(self, plan_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self.table} WHERE plan_id=%s", (int(plan_id),))
            return cur.rowcount > 0


class MySQLWorkoutPlanRepository(_MySQLContentRepository, ContentRepository[WorkoutPlan]):
    table = "workout_plans"
    columns = ("title", "goal", "level", "image_url", "access", "assigned_to", "exercises", "created_by")

    def _from_row(self, r: dict) -> WorkoutPlan:
        return WorkoutPlan(
            plan_id=int(r["plan_id"]),
            title=r["title"],
            goal=r["goal"],
            level=PlanLevel(r["level"]),
            image_url=r.get("image_url"),
            access=AccessLevel(r["access"]),
            assigned_to=[int(u) for u in load_json(r.get("assigned_to"), [])],
            exercises=[
                Exercise(
                    name=e["name"],
                    reps=str(e["reps"]),
                    sets=int(e.get("sets", 3)),
                    video_url=e.get("video_url"),
                )
                for e in load_json(r.get("exercises"), [])
            ],
            created_by=r.get("created_by"),
            created_at=r.get("created_at"),
        )

    def _values(self, plan: WorkoutPlan) -> tuple:
        return (
            plan.title,
            plan.goal,
            plan.level.value,
            plan.image_url,
            plan.access.value,
            dump_json(list(plan.assigned_to)),
            dump_json([
                {"name": e.name, "sets": e.sets, "reps": e.reps, "video_url": e.video_url}
                for e in plan.exercises
            ]),
            plan.created_by,
        )


class MySQLDietPlanRepository(_MySQLContentRepository, ContentRepository[DietPlan]):
    table = "diet_plans"
    columns = ("title", "diet_type", "description", "access", "assigned_to", "meals", "created_by")

    def _from_row(self, r: dict) -> DietPlan:
        return DietPlan(
            plan_id=int(r["plan_id"]),
            title=r["title"],
            diet_type=DietType(r["diet_type"]),
            description=r["description"],
            access=AccessLevel(r["access"]),
            assigned_to=[int(u) for u in load_json(r.get("assigned_to"), [])],
            meals=[
                Meal(time=m["time"], food=m["food"], calories=int(m.get("calories", 0)))
                for m in load_json(r.get("meals"), [])
            ],
            created_by=r.get("created_by"),
            created_at=r.get("created_at"),
        )

    def _values(self, plan: DietPlan) -> tuple:
        return (
            plan.title,
            plan.diet_type.value,
            plan.description,
            plan.access.value,
            dump_json(list(plan.assigned_to)),
            dump_json([{"time": m.time, "food": m.food, "calories": m.calories} for m in plan.meals]),
            plan.created_by,
        )
