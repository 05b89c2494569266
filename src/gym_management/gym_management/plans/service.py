from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..common.validators import parse_decimal, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Plan
from .repository import PlanRepository


def _clean_features(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("features must be a list")
    return [str(f).strip() for f in value if str(f).strip()]


class PlanService:
    def __init__(self, plans: PlanRepository):
        self._plans = plans

    def list_plans(self) -> list[Plan]:
        return list(self._plans.list_all())

    def get(self, plan_id: int) -> Plan:
        plan = self._plans.get_by_id(plan_id)
        if not plan:
            raise NotFoundError("Plan not found")
        return plan

    def create(self, data: dict) -> Plan:
        plan_id = self._plans.create(**self._validated(data))
        return self.get(plan_id)

    def update(self, plan_id: int, data: dict) -> Plan:
        current = self.get(plan_id)
        merged = {
            "name": current.name,
            "price": current.price,
            "duration": current.duration,
            "features": current.features,
            "popular": current.popular,
            "description": current.description,
        }
        merged.update({k: v for k, v in data.items() if k in merged})
        self._plans.update(plan_id, **self._validated(merged))
        return self.get(plan_id)

    def delete(self, plan_id: int) -> None:
        if not self._plans.delete_by_id(plan_id):
            raise NotFoundError("Plan not found")

    @staticmethod
    def _validated(data: dict) -> dict:
        if data.get("price") is None:
            raise ValidationError("price is required")
        description: Optional[str] = data.get("description")
        return {
            "name": require_non_empty(data.get("name"), "name"),
            "price": parse_decimal(data.get("price"), "price", minimum=Decimal("0")),
            "duration": require_non_empty(data.get("duration"), "duration"),
            "features": _clean_features(data.get("features")),
            "popular": bool(data.get("popular", False)),
            "description": description.strip() if isinstance(description, str) else None,
        }
