from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PaymentMethod, PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Payment
from .repository import PaymentRepository

_COLUMNS = """
    payment_id, user_id, order_id, provider_payment_id, signature, plan_id, plan_name,
    amount, currency, status, method, customer_name, customer_email, customer_phone,
    membership_activated, created_at
"""


def _row_to_payment(r: dict) -> Payment:
    return Payment(
        payment_id=int(r["payment_id"]),
        order_id=r["order_id"],
        plan_id=r.get("plan_id"),
        plan_name=r["plan_name"],
        amount=Decimal(str(r["amount"])),
        customer_name=r["customer_name"],
        customer_email=r["customer_email"],
        customer_phone=r.get("customer_phone") or "",
        user_id=r.get("user_id"),
        currency=r["currency"],
        status=PaymentStatus(r["status"]),
        method=PaymentMethod(r["method"]),
        provider_payment_id=r.get("provider_payment_id"),
        signature=r.get("signature"),
        membership_activated=bool(r.get("membership_activated")),
        created_at=r.get("created_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        order_id,
        user_id,
        plan_id,
        plan_name,
        amount,
        currency,
        customer_name,
        customer_email,
        customer_phone,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payments(order_id, user_id, plan_id, plan_name, amount, currency,
                                     status, customer_name, customer_email, customer_phone)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    order_id,
                    user_id,
                    plan_id,
                    plan_name,
                    amount,
                    currency,
                    PaymentStatus.PENDING.value,
                    customer_name,
                    customer_email,
                    customer_phone,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payments WHERE order_id=%s", (order_id,))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def mark_completed(self, payment_id: int, *, provider_payment_id: str, signature: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payments SET provider_payment_id=%s, signature=%s, status=%s
                WHERE payment_id=%s
                """,
                (provider_payment_id, signature, PaymentStatus.COMPLETED.value, int(payment_id)),
            )
            return cur.rowcount > 0

    def mark_membership_activated(self, payment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE payments SET membership_activated=1 WHERE payment_id=%s", (int(payment_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payments ORDER BY created_at DESC, payment_id DESC")
            return [_row_to_payment(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[Payment]:
        sql = f"SELECT {_COLUMNS} FROM payments WHERE user_id=%s ORDER BY created_at DESC, payment_id DESC"
        params: tuple = (int(user_id),)
        if limit is not None:
            sql += " LIMIT %s"
            params += (int(limit),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_payment(r) for r in fetchall(cur)]
