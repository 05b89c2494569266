from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Plan:
    """A purchasable membership plan (e.g. "Pro", 2499, "3 Months")."""

    plan_id: int
    name: str
    price: Decimal
    duration: str
    features: list[str] = field(default_factory=list)
    popular: bool = False
    description: Optional[str] = None
    created_at: Optional[datetime] = None
