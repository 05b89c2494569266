from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Mood

MEASUREMENT_KEYS = ("chest", "waist", "hips", "arms", "thighs", "neck")
STRENGTH_KEYS = ("bench_press", "squat", "deadlift", "overhead_press")


@dataclass(frozen=True)
class ProgressEntry:
    """Domain entity: one body/fitness check-in logged by a user."""

    entry_id: int
    user_id: int
    entry_date: datetime
    weight: float
    body_fat: Optional[float] = None
    bmi: Optional[float] = None
    measurements: dict = field(default_factory=dict)
    strength_metrics: dict = field(default_factory=dict)
    energy: Optional[int] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[int] = None
    mood: Optional[Mood] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
