from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import Role
from .model import CustomerFilter, Membership, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str, phone: str, role: Role) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, phone: str, profile_image: Optional[str]) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int, at: datetime) -> None:
        raise NotImplementedError

    def set_role(self, user_id: int, role: Role) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_notes(self, user_id: int, notes: str) -> bool:
        raise NotImplementedError

    def save_membership(self, user_id: int, *, membership: Optional[Membership], role: Role) -> bool:
        """Persist the embedded membership together with the (possibly promoted) role."""

        raise NotImplementedError

    def expire_lapsed(self, now: datetime) -> int:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def search(
        self,
        filters: CustomerFilter,
        *,
        now: datetime,
        offset: int,
        limit: int,
    ) -> Tuple[Sequence[User], int]:
        raise NotImplementedError
