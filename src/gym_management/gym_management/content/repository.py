from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar

from .model import DietPlan, WorkoutPlan

T = TypeVar("T", WorkoutPlan, DietPlan)


class ContentRepository(Protocol[T]):
    def list_all(self) -> Sequence[T]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, plan_id: int) -> Optional[T]:
        raise NotImplementedError

    def create(self, plan: T) -> int:
        """Insert `plan` (its plan_id is ignored) and return the new id."""

        raise NotImplementedError

    def update(self, plan: T) -> bool:
        raise NotImplementedError

    def delete_by_id(self, plan_id: int) -> bool:
        raise NotImplementedError


WorkoutPlanRepository = ContentRepository[WorkoutPlan]
DietPlanRepository = ContentRepository[DietPlan]
