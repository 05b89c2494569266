from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AccessLevel, DietType, PlanLevel


@dataclass(frozen=True)
class Exercise:
    name: str
    reps: str
    sets: int = 3
    video_url: Optional[str] = None


@dataclass(frozen=True)
class Meal:
    time: str
    food: str
    calories: int = 0


@dataclass(frozen=True)
class WorkoutPlan:
    """Domain entity: a workout plan behind an access tier."""

    plan_id: int
    title: str
    goal: str
    exercises: list[Exercise]
    level: PlanLevel = PlanLevel.BEGINNER
    image_url: Optional[str] = None
    access: AccessLevel = AccessLevel.PUBLIC
    assigned_to: list[int] = field(default_factory=list)
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def items(self) -> list[Exercise]:
        return self.exercises


@dataclass(frozen=True)
class DietPlan:
    """Domain entity: a diet plan behind an access tier (members-only by default)."""

    plan_id: int
    title: str
    description: str
    meals: list[Meal]
    diet_type: DietType = DietType.VEG
    access: AccessLevel = AccessLevel.MEMBERS
    assigned_to: list[int] = field(default_factory=list)
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def items(self) -> list[Meal]:
        return self.meals
