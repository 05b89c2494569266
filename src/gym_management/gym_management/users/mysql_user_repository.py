from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from ..core.constants import EXPIRING_SOON_DAYS
from ..core.enums import MembershipStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CustomerFilter, Membership, User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, email, password_hash, phone, role, profile_image, notes,
    is_active, last_login, created_at,
    membership_plan_id, membership_plan_name, membership_start, membership_end,
    membership_status, membership_auto_renew
"""


def _row_to_user(row: dict) -> User:
    membership = None
    if row.get("membership_status"):
        membership = Membership(
            plan_id=row.get("membership_plan_id"),
            plan_name=row.get("membership_plan_name"),
            start_date=row.get("membership_start"),
            end_date=row.get("membership_end"),
            status=MembershipStatus(row["membership_status"]),
            auto_renew=bool(row.get("membership_auto_renew")),
        )
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        phone=row.get("phone") or "",
        membership=membership,
        profile_image=row.get("profile_image"),
        notes=row.get("notes") or "",
        is_active=bool(row.get("is_active", True)),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, phone: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, phone, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email.lower(), password_hash, phone, role.value),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: str, phone: str, profile_image: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, phone=%s, profile_image=%s WHERE user_id=%s",
                (name, phone, profile_image, int(user_id)),
            )
            return cur.rowcount > 0

    def touch_last_login(self, user_id: int, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE user_id=%s", (at, int(user_id)))

    def set_role(self, user_id: int, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE user_id=%s", (role.value, int(user_id)))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def set_notes(self, user_id: int, notes: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET notes=%s WHERE user_id=%s", (notes, int(user_id)))
            return cur.rowcount > 0

    def save_membership(self, user_id: int, *, membership: Optional[Membership], role: Role) -> bool:
        m = membership
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET role=%s,
                    membership_plan_id=%s, membership_plan_name=%s,
                    membership_start=%s, membership_end=%s,
                    membership_status=%s, membership_auto_renew=%s
                WHERE user_id=%s
                """,
                (
                    role.value,
                    m.plan_id if m else None,
                    m.plan_name if m else None,
                    m.start_date if m else None,
                    m.end_date if m else None,
                    m.status.value if m else None,
                    1 if (m and m.auto_renew) else 0,
                    int(user_id),
                ),
            )
            return cur.rowcount > 0

    def expire_lapsed(self, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users SET membership_status=%s
                WHERE membership_status=%s AND membership_end IS NOT NULL AND membership_end <= %s
                """,
                (MembershipStatus.EXPIRED.value, MembershipStatus.ACTIVE.value, now),
            )
            return int(cur.rowcount)

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def search(
        self,
        filters: CustomerFilter,
        *,
        now: datetime,
        offset: int,
        limit: int,
    ) -> Tuple[Sequence[User], int]:
        clauses: list[str] = []
        params: list[object] = []

        if filters.role is not None:
            clauses.append("role=%s")
            params.append(filters.role.value)

        status = filters.membership_status
        if status == "active":
            clauses.append("membership_status='active' AND (membership_end IS NULL OR membership_end > %s)")
            params.append(now)
        elif status == "expired":
            clauses.append(
                "(membership_status='expired' OR (membership_status='active' AND membership_end <= %s))"
            )
            params.append(now)
        elif status in {"cancelled", "pending"}:
            clauses.append("membership_status=%s")
            params.append(status)
        elif status == "none":
            clauses.append("membership_status IS NULL")

        if filters.expiring_soon:
            clauses.append("membership_status='active' AND membership_end > %s AND membership_end <= %s")
            params.extend([now, now + timedelta(days=EXPIRING_SOON_DAYS)])

        if filters.search:
            clauses.append("(name LIKE %s OR email LIKE %s)")
            like = f"%{filters.search}%"
            params.extend([like, like])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM users {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total", 0))

            cur.execute(
                f"""
                SELECT {_USER_COLUMNS} FROM users {where}
                ORDER BY created_at DESC, user_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_user(r) for r in fetchall(cur)], total
