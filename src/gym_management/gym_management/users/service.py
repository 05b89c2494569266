from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..auth.tokens import TokenService
from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .model import CustomerFilter, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """What the login/register endpoints hand back to the client."""

    user: User
    token: str


class AuthService:
    """Use cases: register, login and resolve bearer tokens to users."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    @property
    def tokens(self) -> TokenService:
        return self._tokens

    def register(self, *, name: str, email: str, password: str, phone: str = "") -> AuthResult:
        if not name or not email or not password:
            raise ValidationError("Please provide name, email, and password")
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User already exists with this email")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            phone=(phone or "").strip(),
            role=Role.VISITOR,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        logger.info("Registered user %s (%s)", user.user_id, user.email)
        return AuthResult(user=user, token=self._tokens.issue(user_id=user.user_id, role=user.role))

    def login(self, email: str, password: str, *, now: Optional[datetime] = None) -> AuthResult:
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except (TypeError, ValueError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthorizationError("Account is deactivated")

        self._users.touch_last_login(user.user_id, now or now_local())
        return AuthResult(user=user, token=self._tokens.issue(user_id=user.user_id, role=user.role))

    def admin_login(self, email: str, password: str, *, now: Optional[datetime] = None) -> AuthResult:
        result = self.login(email, password, now=now)
        if not result.user.is_admin:
            raise AuthorizationError("Admin access required")
        return result

    def resolve_token(self, token: str) -> User:
        """Bearer token -> active user; unknown users are 401, deactivated ones 403."""

        claims = self._tokens.decode(token)
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise AuthenticationError("User not found")
        if not user.is_active:
            raise AuthorizationError("Account is deactivated")
        return user


@dataclass(frozen=True)
class CustomerPage:
    customers: list[User]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class UserService:
    """Use cases: profile updates and admin customer management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        user: User,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        profile_image: Optional[str] = None,
    ) -> User:
        current = self.get(user.user_id)
        self._users.update_profile(
            current.user_id,
            name=require_non_empty(name, "Name") if name else current.name,
            phone=phone.strip() if phone is not None else current.phone,
            profile_image=profile_image or current.profile_image,
        )
        return self.get(current.user_id)

    def list_customers(
        self,
        filters: CustomerFilter,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        now: Optional[datetime] = None,
    ) -> CustomerPage:
        page = max(1, int(page))
        limit = max(1, int(limit))
        customers, total = self._users.search(
            filters,
            now=now or now_local(),
            offset=(page - 1) * limit,
            limit=limit,
        )
        return CustomerPage(customers=list(customers), page=page, limit=limit, total=int(total))

    def update_role(self, *, actor: User, user_id: int, role: Role) -> User:
        target = self.get(user_id)
        if actor.role != Role.SUPER_ADMIN and (target.role == Role.SUPER_ADMIN or role == Role.SUPER_ADMIN):
            raise AuthorizationError("Cannot modify super_admin role")
        if target.user_id == actor.user_id and role != actor.role:
            raise ValidationError("You cannot change your own role")

        self._users.set_role(target.user_id, role)
        logger.info("User %s changed role of %s: %s -> %s", actor.user_id, user_id, target.role.value, role.value)
        return self.get(user_id)

    def set_active(self, *, actor: User, user_id: int, is_active: bool) -> User:
        target = self.get(user_id)
        if target.user_id == actor.user_id:
            raise ValidationError("You cannot deactivate your own account")
        if target.role == Role.SUPER_ADMIN and actor.role != Role.SUPER_ADMIN:
            raise AuthorizationError("Cannot modify super_admin account")

        self._users.set_active(target.user_id, is_active=bool(is_active))
        return self.get(user_id)

    def update_notes(self, *, user_id: int, notes: str) -> User:
        target = self.get(user_id)
        self._users.set_notes(target.user_id, (notes or "").strip())
        return self.get(user_id)

    def delete_customer(self, *, actor: User, user_id: int) -> None:
        target = self.get(user_id)
        if target.user_id == actor.user_id:
            raise ValidationError("You cannot delete your own account")
        if target.role == Role.SUPER_ADMIN and actor.role != Role.SUPER_ADMIN:
            raise AuthorizationError("Cannot delete super_admin account")

        if not self._users.delete_by_id(target.user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted customer %s", actor.user_id, user_id)
