from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.validators import require_email
from ..core.constants import DEFAULT_CURRENCY
from ..core.enums import PaymentStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..memberships.service import MembershipService
from ..plans.repository import PlanRepository
from ..users.model import User
from ..users.repository import UserRepository
from .gateway import DEMO_SIGNATURE, PaymentGateway, demo_payment_id
from .model import CreatedOrder, Payment
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedPayment:
    payment: Payment
    demo: bool


def to_minor_units(price: Decimal) -> int:
    return int((Decimal(price) * 100).to_integral_value())


class PaymentService:
    """Use cases: open a checkout order, confirm it, and activate the membership."""

    def __init__(
        self,
        payments: PaymentRepository,
        plans: PlanRepository,
        users: UserRepository,
        memberships: MembershipService,
        gateway: PaymentGateway,
        *,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._payments = payments
        self._plans = plans
        self._users = users
        self._memberships = memberships
        self._gateway = gateway
        self._currency = currency

    @property
    def demo(self) -> bool:
        return self._gateway.demo

    def create_order(
        self,
        *,
        plan_id: Optional[int],
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        customer_phone: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> CreatedOrder:
        user: Optional[User] = None
        if user_id:
            user = self._users.get_by_id(int(user_id))
            if not user:
                raise NotFoundError("User not found")
            customer_name = customer_name or user.name
            customer_email = customer_email or user.email

        if not plan_id or not customer_name or not customer_email:
            raise ValidationError("Please provide plan_id, customer_name, and customer_email")
        customer_email = require_email(customer_email)

        plan = self._plans.get_by_id(int(plan_id))
        if not plan:
            raise NotFoundError("Plan not found")

        order = self._gateway.create_order(
            amount=to_minor_units(plan.price),
            currency=self._currency,
            receipt=f"receipt_{int(time.time() * 1000)}",
            notes={
                "plan_id": str(plan.plan_id),
                "plan_name": plan.name,
                "customer_name": customer_name,
                "customer_email": customer_email,
            },
        )
        payment_id = self._payments.create(
            order_id=order.order_id,
            user_id=user.user_id if user else None,
            plan_id=plan.plan_id,
            plan_name=plan.name,
            amount=plan.price,
            currency=order.currency,
            customer_name=customer_name.strip(),
            customer_email=customer_email,
            customer_phone=(customer_phone or "").strip(),
        )
        logger.info("Created order %s for plan %s (payment %s)", order.order_id, plan.name, payment_id)
        return CreatedOrder(
            order_id=order.order_id,
            amount=order.amount,
            currency=order.currency,
            payment_id=payment_id,
            demo=self._gateway.demo,
        )

    def verify(
        self,
        *,
        order_id: Optional[str],
        payment_id: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> VerifiedPayment:
        if not order_id:
            raise ValidationError("Missing order ID")

        if self._gateway.demo:
            payment_id = payment_id or demo_payment_id()
            signature = signature or DEMO_SIGNATURE
        else:
            if not payment_id or not signature:
                raise ValidationError("Missing payment verification details")
            if not self._gateway.verify_signature(order_id=order_id, payment_id=payment_id, signature=signature):
                raise ValidationError("Invalid payment signature")

        payment = self._payments.get_by_order_id(order_id)
        if not payment:
            raise NotFoundError("Payment record not found")

        if payment.status != PaymentStatus.COMPLETED:
            self._payments.mark_completed(payment.payment_id, provider_payment_id=payment_id, signature=signature)
            logger.info("Payment %s completed (order %s)", payment.payment_id, order_id)

        if payment.user_id and not payment.membership_activated:
            if payment.plan_id:
                self._memberships.activate(
                    user_id=payment.user_id,
                    plan_id=payment.plan_id,
                    payment_id=payment.payment_id,
                )
            else:
                logger.warning("Payment %s has no plan; membership not activated", payment.payment_id)

        refreshed = self._payments.get_by_id(payment.payment_id) or payment
        return VerifiedPayment(payment=refreshed, demo=self._gateway.demo)

    def get(self, *, actor: User, payment_id: int) -> Payment:
        payment = self._payments.get_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment not found")
        if not actor.is_admin and payment.user_id != actor.user_id:
            raise AuthorizationError("Not authorized to view this payment")
        return payment

    def list_all(self) -> list[Payment]:
        return list(self._payments.list_all())

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> list[Payment]:
        return list(self._payments.list_for_user(int(user_id), limit=limit))
