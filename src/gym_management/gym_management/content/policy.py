"""Who may read a tiered workout/diet plan, and what anonymous callers see."""

from __future__ import annotations

from typing import Optional, Union

from ..common.serialization import to_jsonable
from ..core.enums import AccessLevel
from ..users.model import User
from .model import DietPlan, WorkoutPlan

ContentPlan = Union[WorkoutPlan, DietPlan]


def can_view(plan: ContentPlan, user: Optional[User]) -> bool:
    if user is not None and user.is_admin:
        return True
    if plan.access == AccessLevel.PUBLIC:
        return True
    if user is None:
        return False
    if plan.access == AccessLevel.MEMBERS:
        return user.is_member
    if plan.access == AccessLevel.ASSIGNED:
        return user.user_id in plan.assigned_to
    return False


def is_previewable(plan: ContentPlan) -> bool:
    return plan.access != AccessLevel.ASSIGNED


def preview(plan: ContentPlan) -> dict:
    """Redacted form: identity, tier, item count and the first item only."""

    data = {
        "plan_id": plan.plan_id,
        "title": plan.title,
        "access": plan.access.value,
        "total_items": len(plan.items),
        "sample": [to_jsonable(i) for i in plan.items[:1]],
        "locked": plan.access != AccessLevel.PUBLIC,
    }
    if isinstance(plan, WorkoutPlan):
        data.update(goal=plan.goal, level=plan.level.value, image_url=plan.image_url)
    else:
        data.update(diet_type=plan.diet_type.value, description=plan.description)
    return data
