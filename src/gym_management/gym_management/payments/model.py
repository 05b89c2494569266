from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_CURRENCY
from ..core.enums import PaymentMethod, PaymentStatus


@dataclass(frozen=True)
class Payment:
    """One checkout attempt for a plan; `user_id` is empty for guest checkouts."""

    payment_id: int
    order_id: str
    plan_id: Optional[int]
    plan_name: str
    amount: Decimal
    customer_name: str
    customer_email: str
    customer_phone: str = ""
    user_id: Optional[int] = None
    currency: str = DEFAULT_CURRENCY
    status: PaymentStatus = PaymentStatus.PENDING
    method: PaymentMethod = PaymentMethod.RAZORPAY
    provider_payment_id: Optional[str] = None
    signature: Optional[str] = None
    membership_activated: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CreatedOrder:
    """What the checkout widget needs; `amount` is in minor units (paise)."""

    order_id: str
    amount: int
    currency: str
    payment_id: int
    demo: bool = False
