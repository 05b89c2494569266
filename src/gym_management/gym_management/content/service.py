from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Generic, Optional, TypeVar

from ..common.validators import parse_enum, require_non_empty
from ..core.enums import AccessLevel, DietType, PlanLevel
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from .model import DietPlan, Exercise, Meal, WorkoutPlan
from .policy import can_view, is_previewable, preview
from .repository import ContentRepository

logger = logging.getLogger(__name__)

T = TypeVar("T", WorkoutPlan, DietPlan)


@dataclass(frozen=True)
class ContentListing:
    """Either full plans, or redacted previews when `preview` is set."""

    preview: bool
    items: list[Any]


def _assigned_ids(value: Any) -> list[int]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("assigned_to must be a list of user ids")
    try:
        return sorted({int(v) for v in value})
    except (TypeError, ValueError):
        raise ValidationError("assigned_to must be a list of user ids")


def _int_field(value: Any, field_name: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


class _TieredContentService(Generic[T]):
    kind = "plan"

    def __init__(self, repo: ContentRepository[T]):
        self._repo = repo

    def _build(self, data: dict, *, created_by: Optional[int]) -> T:
        raise NotImplementedError

    def _as_input(self, plan: T) -> dict:
        raise NotImplementedError

    def _get(self, plan_id: int) -> T:
        plan = self._repo.get_by_id(plan_id)
        if not plan:
            raise NotFoundError(f"{self.kind.capitalize()} not found")
        return plan

    def list_for(self, user: Optional[User], *, preview_requested: bool = False) -> ContentListing:
        is_member = user is not None and user.is_member
        plans = list(self._repo.list_all())

        if (preview_requested or user is None) and not is_member:
            return ContentListing(preview=True, items=[preview(p) for p in plans if is_previewable(p)])

        if user is None:
            raise AuthenticationError("Authentication required")
        if not is_member:
            raise AuthorizationError("Members only content")

        return ContentListing(preview=False, items=[p for p in plans if can_view(p, user)])

    def get_for(self, plan_id: int, user: Optional[User]) -> T:
        plan = self._get(plan_id)
        if user is not None and user.is_admin:
            return plan
        if user is None:
            raise AuthenticationError("Authentication required")
        if not user.is_member:
            raise AuthorizationError("Members only content")
        if not can_view(plan, user):
            raise AuthorizationError("Plan is restricted")
        return plan

    def create(self, data: dict, *, actor: User) -> T:
        plan = self._build(data, created_by=actor.user_id)
        plan_id = self._repo.create(plan)
        logger.info("User %s created %s %s", actor.user_id, self.kind, plan_id)
        return self._get(plan_id)

    def update(self, plan_id: int, data: dict) -> T:
        current = self._get(plan_id)
        merged = self._as_input(current)
        merged.update({k: v for k, v in data.items() if k in merged})
        plan = replace(self._build(merged, created_by=current.created_by), plan_id=current.plan_id)
        self._repo.update(plan)
        return self._get(plan_id)

    def delete(self, plan_id: int) -> None:
        if not self._repo.delete_by_id(plan_id):
            raise NotFoundError(f"{self.kind.capitalize()} not found")


class WorkoutPlanService(_TieredContentService[WorkoutPlan]):
    kind = "workout plan"

    def _build(self, data: dict, *, created_by: Optional[int]) -> WorkoutPlan:
        raw_exercises = data.get("exercises")
        if not data.get("title") or not data.get("goal") or not raw_exercises:
            raise ValidationError("Title, goal and exercises are required")
        if not isinstance(raw_exercises, list):
            raise ValidationError("exercises must be a list")

        exercises = []
        for e in raw_exercises:
            if not isinstance(e, dict):
                raise ValidationError("Each exercise must be an object")
            exercises.append(
                Exercise(
                    name=require_non_empty(e.get("name"), "Exercise name"),
                    reps=require_non_empty(str(e.get("reps") or ""), "Exercise reps"),
                    sets=_int_field(e.get("sets"), "sets", 3),
                    video_url=(e.get("video_url") or None),
                )
            )

        return WorkoutPlan(
            plan_id=0,
            title=require_non_empty(data.get("title"), "Title"),
            goal=require_non_empty(data.get("goal"), "Goal"),
            exercises=exercises,
            level=parse_enum(PlanLevel, data.get("level"), "level", default=PlanLevel.BEGINNER),
            image_url=data.get("image_url") or None,
            access=parse_enum(AccessLevel, data.get("access"), "access", default=AccessLevel.PUBLIC),
            assigned_to=_assigned_ids(data.get("assigned_to")),
            created_by=created_by,
        )

    def _as_input(self, plan: WorkoutPlan) -> dict:
        return {
            "title": plan.title,
            "goal": plan.goal,
            "level": plan.level.value,
            "image_url": plan.image_url,
            "access": plan.access.value,
            "assigned_to": list(plan.assigned_to),
            "exercises": [
                {"name": e.name, "sets": e.sets, "reps": e.reps, "video_url": e.video_url} for e in plan.exercises
            ],
        }


class DietPlanService(_TieredContentService[DietPlan]):
    kind = "diet plan"

    def _build(self, data: dict, *, created_by: Optional[int]) -> DietPlan:
        raw_meals = data.get("meals")
        if not data.get("title") or not data.get("description") or not raw_meals:
            raise ValidationError("Title, description and meals are required")
        if not isinstance(raw_meals, list):
            raise ValidationError("meals must be a list")

        meals = []
        for m in raw_meals:
            if not isinstance(m, dict):
                raise ValidationError("Each meal must be an object")
            meals.append(
                Meal(
                    time=require_non_empty(m.get("time"), "Meal time"),
                    food=require_non_empty(m.get("food"), "Meal food"),
                    calories=_int_field(m.get("calories"), "calories", 0),
                )
            )

        return DietPlan(
            plan_id=0,
            title=require_non_empty(data.get("title"), "Title"),
            description=require_non_empty(data.get("description"), "Description"),
            meals=meals,
            diet_type=parse_enum(DietType, data.get("diet_type"), "diet_type", default=DietType.VEG),
            access=parse_enum(AccessLevel, data.get("access"), "access", default=AccessLevel.MEMBERS),
            assigned_to=_assigned_ids(data.get("assigned_to")),
            created_by=created_by,
        )

    def _as_input(self, plan: DietPlan) -> dict:
        return {
            "title": plan.title,
            "diet_type": plan.diet_type.value,
            "description": plan.description,
            "access": plan.access.value,
            "assigned_to": list(plan.assigned_to),
            "meals": [{"time": m.time, "food": m.food, "calories": m.calories} for m in plan.meals],
        }
