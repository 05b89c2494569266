from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Payment


class PaymentRepository(Protocol):
    def create(
        self,
        *,
        order_id: str,
        user_id: Optional[int],
        plan_id: int,
        plan_name: str,
        amount: Decimal,
        currency: str,
        customer_name: str,
        customer_email: str,
        customer_phone: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        raise NotImplementedError

    def mark_completed(self, payment_id: int, *, provider_payment_id: str, signature: str) -> bool:
        raise NotImplementedError

    def mark_membership_activated(self, payment_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Payment]:
        """Newest first."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[Payment]:
        raise NotImplementedError
