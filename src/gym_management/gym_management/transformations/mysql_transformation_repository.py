from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Transformation, TransformationView
from .repository import TransformationRepository

_COLUMNS = "t.transformation_id, t.user_id, t.before_image, t.after_image, t.story, t.approved, t.featured, t.created_at"


def _row_to_transformation(r: dict) -> Transformation:
    return Transformation(
        transformation_id=int(r["transformation_id"]),
        user_id=int(r["user_id"]),
        before_image=r["before_image"],
        after_image=r["after_image"],
        story=r["story"],
        approved=bool(r.get("approved")),
        featured=bool(r.get("featured")),
        created_at=r.get("created_at"),
    )


class MySQLTransformationRepository(TransformationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, before_image: str, after_image: str, story: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transformations(user_id, before_image, after_image, story)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), before_image, after_image, story),
            )
            return int(cur.lastrowid)

    def get_by_id(self, transformation_id: int) -> Optional[Transformation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM transformations t WHERE t.transformation_id=%s",
                (int(transformation_id),),
            )
            r = fetchone(cur)
            return _row_to_transformation(r) if r else None

    def has_pending(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM transformations WHERE user_id=%s AND approved=0 LIMIT 1",
                (int(user_id),),
            )
            return fetchone(cur) is not None

    def list_views(self, *, approved_only: bool, user_id: Optional[int] = None) -> Sequence[TransformationView]:
        clauses: list[str] = []
        params: list[object] = []
        if approved_only:
            clauses.append("t.approved=1")
        if user_id is not None:
            clauses.append("t.user_id=%s")
            params.append(int(user_id))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS user_name, u.role AS user_role, u.created_at AS member_since
                FROM transformations t
                LEFT JOIN users u ON u.user_id = t.user_id
                {where}
                ORDER BY t.created_at DESC, t.transformation_id DESC
                """,
                tuple(params),
            )
            return [
                TransformationView(
                    transformation=_row_to_transformation(r),
                    user_name=r.get("user_name"),
                    user_role=r.get("user_role"),
                    member_since=r.get("member_since"),
                )
                for r in fetchall(cur)
            ]

    def approve(self, transformation_id: int, *, featured: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE transformations SET approved=1, featured=%s WHERE transformation_id=%s",
                (1 if featured else 0, int(transformation_id)),
            )
            return cur.rowcount >= 0

    def delete_by_id(self, transformation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM transformations WHERE transformation_id=%s", (int(transformation_id),))
            return cur.rowcount > 0
