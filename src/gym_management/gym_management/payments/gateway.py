"""Payment provider adapters.

`RazorpayGateway` talks to Razorpay; `DemoGateway` fabricates order and
payment references so the checkout flow works without credentials.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

DEMO_SIGNATURE = "demo_signature"


@dataclass(frozen=True)
class GatewayOrder:
    order_id: str
    amount: int
    currency: str


class PaymentGateway(Protocol):
    demo: bool

    def create_order(self, *, amount: int, currency: str, receipt: str, notes: dict) -> GatewayOrder:
        raise NotImplementedError

    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        raise NotImplementedError


def _now_ms() -> int:
    return int(time.time() * 1000)


def demo_payment_id() -> str:
    return f"pay_demo_{_now_ms()}"


class DemoGateway:
    demo = True

    def __init__(self):
        self._last_ms = 0

    def _next_ms(self) -> int:
        # Order ids are unique in the payments table; never hand out the same millisecond twice.
        ms = max(_now_ms(), self._last_ms + 1)
        self._last_ms = ms
        return ms

    def create_order(self, *, amount: int, currency: str, receipt: str, notes: dict) -> GatewayOrder:
        return GatewayOrder(order_id=f"order_demo_{self._next_ms()}", amount=int(amount), currency=currency)

    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        return True


class RazorpayGateway:
    demo = False

    def __init__(self, key_id: str, key_secret: str):
        import razorpay

        self._razorpay = razorpay
        self._client = razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, *, amount: int, currency: str, receipt: str, notes: dict) -> GatewayOrder:
        order = self._client.order.create(
            data={"amount": int(amount), "currency": currency, "receipt": receipt, "notes": notes}
        )
        return GatewayOrder(order_id=order["id"], amount=int(order["amount"]), currency=order["currency"])

    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        try:
            self._client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": order_id,
                    "razorpay_payment_id": payment_id,
                    "razorpay_signature": signature,
                }
            )
        except self._razorpay.errors.SignatureVerificationError:
            logger.warning("Signature mismatch for order %s", order_id)
            return False
        return True


def build_gateway(*, demo_mode: bool, key_id: Optional[str], key_secret: Optional[str]) -> PaymentGateway:
    """Demo unless explicitly disabled and both credentials are present."""

    if demo_mode or not key_id or not key_secret:
        return DemoGateway()
    return RazorpayGateway(key_id, key_secret)
