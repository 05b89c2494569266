from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Mood
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import ProgressEntry
from .repository import ProgressRepository

_COLUMNS = """
    entry_id, user_id, entry_date, weight, body_fat, bmi, measurements, strength_metrics,
    energy, sleep_hours, sleep_quality, mood, notes, photo_url, created_at
"""


def _row_to_entry(r: dict) -> ProgressEntry:
    return ProgressEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        entry_date=r["entry_date"],
        weight=float(r["weight"]),
        body_fat=r.get("body_fat"),
        bmi=r.get("bmi"),
        measurements=dict(load_json(r.get("measurements"), {})),
        strength_metrics=dict(load_json(r.get("strength_metrics"), {})),
        energy=r.get("energy"),
        sleep_hours=r.get("sleep_hours"),
        sleep_quality=r.get("sleep_quality"),
        mood=Mood(r["mood"]) if r.get("mood") else None,
        notes=r.get("notes"),
        photo_url=r.get("photo_url"),
        created_at=r.get("created_at"),
    )


def _values(e: ProgressEntry) -> tuple:
    return (
        e.entry_date,
        e.weight,
        e.body_fat,
        e.bmi,
        dump_json(e.measurements),
        dump_json(e.strength_metrics),
        e.energy,
        e.sleep_hours,
        e.sleep_quality,
        e.mood.value if e.mood else None,
        e.notes,
        e.photo_url,
    )


class MySQLProgressRepository(ProgressRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: ProgressEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO progress_entries(
                    user_id, entry_date, weight, body_fat, bmi, measurements, strength_metrics,
                    energy, sleep_hours, sleep_quality, mood, notes, photo_url)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(entry.user_id),) + _values(entry),
            )
            return int(cur.lastrowid)

    def get_by_id(self, entry_id: int) -> Optional[ProgressEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM progress_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[ProgressEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM progress_entries WHERE user_id=%s ORDER BY entry_date DESC, entry_id DESC",
                (int(user_id),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def update(self, entry: ProgressEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE progress_entries
                SET entry_date=%s, weight=%s, body_fat=%s, bmi=%s, measurements=%s, strength_metrics=%s,
                    energy=%s, sleep_hours=%s, sleep_quality=%s, mood=%s, notes=%s, photo_url=%s
                WHERE entry_id=%s
                """,
                _values(entry) + (int(entry.entry_id),),
            )
            return cur.rowcount >= 0

    def delete_by_id(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM progress_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
