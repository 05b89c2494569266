from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Plan


class PlanRepository(Protocol):
    def list_all(self) -> Sequence[Plan]:
        raise NotImplementedError

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        price: Decimal,
        duration: str,
        features: list[str],
        popular: bool,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        plan_id: int,
        *,
        name: str,
        price: Decimal,
        duration: str,
        features: list[str],
        popular: bool,
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, plan_id: int) -> bool:
        raise NotImplementedError
