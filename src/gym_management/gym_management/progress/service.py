from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Optional

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import optional_float, optional_int_in_range, parse_enum
from ..core.enums import Mood
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from .model import MEASUREMENT_KEYS, STRENGTH_KEYS, ProgressEntry
from .repository import ProgressRepository

logger = logging.getLogger(__name__)


def compute_bmi(weight_kg: float, height_cm: Optional[float]) -> Optional[float]:
    """BMI from weight in kg and height in cm; None without a usable height."""

    if not height_cm or height_cm <= 0:
        return None
    meters = height_cm / 100
    return round(weight_kg / (meters * meters), 2)


def _metric_map(value: Any, keys: Iterable[str], field_name: str, *, text_keys: Iterable[str] = ()) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be an object")
    out: dict = {}
    for key in keys:
        number = optional_float(value.get(key), f"{field_name}.{key}")
        if number is not None:
            out[key] = number
    for key in text_keys:
        if value.get(key):
            out[key] = str(value[key]).strip()
    return out


def _optional_mood(value: Any) -> Optional[Mood]:
    if value is None or value == "":
        return None
    return parse_enum(Mood, value, "mood")


def _weight(value: Any) -> float:
    weight = optional_float(value, "weight")
    if weight is None or weight <= 0:
        raise ValidationError("Weight is required")
    return weight


class ProgressService:
    def __init__(self, entries: ProgressRepository):
        self._entries = entries

    def _get_own(self, actor: User, entry_id: int, verb: str) -> ProgressEntry:
        entry = self._entries.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Progress entry not found")
        if entry.user_id != actor.user_id:
            raise AuthorizationError(f"You can only {verb} your own entries")
        return entry

    def create(self, actor: User, data: dict, *, now: Optional[datetime] = None) -> ProgressEntry:
        if not actor.is_member:
            raise AuthorizationError("Only members can log progress")
        weight = _weight(data.get("weight"))
        entry = ProgressEntry(
            entry_id=0,
            user_id=actor.user_id,
            entry_date=parse_iso_datetime(data["date"]) if data.get("date") else (now or now_local()),
            weight=weight,
            body_fat=optional_float(data.get("body_fat"), "body_fat"),
            bmi=compute_bmi(weight, optional_float(data.get("height"), "height")),
            measurements=_metric_map(data.get("measurements"), MEASUREMENT_KEYS, "measurements"),
            strength_metrics=_metric_map(
                data.get("strength_metrics"), STRENGTH_KEYS, "strength_metrics", text_keys=("notes",)
            ),
            energy=optional_int_in_range(data.get("energy"), "energy", 1, 10),
            sleep_hours=optional_float(data.get("sleep_hours"), "sleep_hours"),
            sleep_quality=optional_int_in_range(data.get("sleep_quality"), "sleep_quality", 1, 10),
            mood=_optional_mood(data.get("mood")),
            notes=(data.get("notes") or "").strip() or None,
            photo_url=data.get("photo_url") or None,
        )
        entry_id = self._entries.create(entry)
        logger.info("User %s logged progress entry %s", actor.user_id, entry_id)
        return self._entries.get_by_id(entry_id) or replace(entry, entry_id=entry_id)

    def list_for(self, actor: User, user_id: int) -> list[ProgressEntry]:
        if actor.user_id != int(user_id) and not actor.is_admin:
            raise AuthorizationError("Not authorized to view progress entries")
        return list(self._entries.list_for_user(int(user_id)))

    def update(self, actor: User, entry_id: int, data: dict) -> ProgressEntry:
        entry = self._get_own(actor, entry_id, "update")
        changes: dict[str, Any] = {}

        if data.get("weight") not in (None, ""):
            changes["weight"] = _weight(data["weight"])
        if "body_fat" in data:
            changes["body_fat"] = optional_float(data["body_fat"], "body_fat")
        if data.get("date"):
            changes["entry_date"] = parse_iso_datetime(data["date"])
        if "notes" in data:
            changes["notes"] = (data["notes"] or "").strip() or None
        if "photo_url" in data:
            changes["photo_url"] = data["photo_url"] or None
        if data.get("measurements"):
            changes["measurements"] = {
                **entry.measurements,
                **_metric_map(data["measurements"], MEASUREMENT_KEYS, "measurements"),
            }
        if data.get("strength_metrics"):
            changes["strength_metrics"] = {
                **entry.strength_metrics,
                **_metric_map(data["strength_metrics"], STRENGTH_KEYS, "strength_metrics", text_keys=("notes",)),
            }
        if "energy" in data:
            changes["energy"] = optional_int_in_range(data["energy"], "energy", 1, 10)
        if "sleep_hours" in data:
            changes["sleep_hours"] = optional_float(data["sleep_hours"], "sleep_hours")
        if "sleep_quality" in data:
            changes["sleep_quality"] = optional_int_in_range(data["sleep_quality"], "sleep_quality", 1, 10)
        if "mood" in data:
            changes["mood"] = _optional_mood(data["mood"])

        height = optional_float(data.get("height"), "height")
        if height:
            changes["bmi"] = compute_bmi(changes.get("weight", entry.weight), height)

        updated = replace(entry, **changes)
        self._entries.update(updated)
        return self._entries.get_by_id(entry.entry_id) or updated

    def delete(self, actor: User, entry_id: int) -> None:
        entry = self._get_own(actor, entry_id, "delete")
        self._entries.delete_by_id(entry.entry_id)
