from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable


def calculate_streak(visit_dates: Iterable[date], today: date) -> int:
    """Consecutive days with a visit, counting back from `today`.

    No visit today means a streak of 0. Duplicate dates are ignored.
    """

    seen = set(visit_dates)
    streak = 0
    day = today
    while day in seen:
        streak += 1
        day -= timedelta(days=1)
    return streak
