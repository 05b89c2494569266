from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Transformation, TransformationView


class TransformationRepository(Protocol):
    def create(self, *, user_id: int, before_image: str, after_image: str, story: str) -> int:
        raise NotImplementedError

    def get_by_id(self, transformation_id: int) -> Optional[Transformation]:
        raise NotImplementedError

    def has_pending(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_views(self, *, approved_only: bool, user_id: Optional[int] = None) -> Sequence[TransformationView]:
        """Newest first."""

        raise NotImplementedError

    def approve(self, transformation_id: int, *, featured: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, transformation_id: int) -> bool:
        raise NotImplementedError
