from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.serialization import to_jsonable
from ..core.enums import ADMIN_ROLES, MEMBER_ROLES, MembershipStatus, Role


@dataclass(frozen=True)
class Membership:
    """A user's subscription to a plan, embedded in the user row."""

    plan_id: Optional[int]
    plan_name: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    status: MembershipStatus = MembershipStatus.PENDING
    auto_renew: bool = False


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code). Admins and gym members share it.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    phone: str = ""
    membership: Optional[Membership] = None
    profile_image: Optional[str] = None
    notes: str = ""
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_member(self) -> bool:
        """Member-or-higher."""
        return self.role in MEMBER_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


@dataclass(frozen=True)
class CustomerFilter:
    role: Optional[Role] = None
    membership_status: Optional[str] = None  # active|expired|cancelled|pending|none
    expiring_soon: bool = False
    search: Optional[str] = None


def public_view(user: User) -> dict:
    """User as returned by the API (never includes the password hash)."""
    data = to_jsonable(user)
    data.pop("password_hash", None)
    return data
