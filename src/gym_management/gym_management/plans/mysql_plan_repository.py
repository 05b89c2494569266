from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Plan
from .repository import PlanRepository


def _row_to_plan(r: dict) -> Plan:
    return Plan(
        plan_id=int(r["plan_id"]),
        name=r["name"],
        price=Decimal(str(r["price"])),
        duration=r["duration"],
        features=list(load_json(r.get("features"), [])),
        popular=bool(r.get("popular")),
        description=r.get("description"),
        created_at=r.get("created_at"),
    )


class MySQLPlanRepository(PlanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT plan_id, name, price, duration, features, popular, description, created_at
                FROM plans
                ORDER BY price ASC, plan_id ASC
                """
            )
            return [_row_to_plan(r) for r in fetchall(cur)]

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT plan_id, name, price, duration, features, popular, description, created_at
                FROM plans WHERE plan_id=%s
                """,
                (int(plan_id),),
            )
            row = fetchone(cur)
            return _row_to_plan(row) if row else None

    def create(self, *, name, price, duration, features, popular, description) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO plans(name, price, duration, features, popular, description)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, price, duration, dump_json(features), 1 if popular else 0, description),
            )
            return int(cur.lastrowid)

    def update(self, plan_id, *, name, price, duration, features, popular, description) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE plans
                SET name=%s, price=%s, duration=%s, features=%s, popular=%s, description=%s
                WHERE plan_id=%s
                """,
                (name, price, duration, dump_json(features), 1 if popular else 0, description, int(plan_id)),
            )
            # MySQL reports 0 affected rows when nothing changed; existence is checked by the service.
            return cur.rowcount >= 0

    def delete_by_id(self, plan_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM plans WHERE plan_id=%s", (int(plan_id),))
            return cur.rowcount > 0
