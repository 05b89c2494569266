from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ProgressEntry


class ProgressRepository(Protocol):
    def create(self, entry: ProgressEntry) -> int:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[ProgressEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[ProgressEntry]:
        """Newest entry_date first."""

        raise NotImplementedError

    def update(self, entry: ProgressEntry) -> bool:
        raise NotImplementedError

    def delete_by_id(self, entry_id: int) -> bool:
        raise NotImplementedError
