from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional

from flask import g, request

from ..core.enums import ADMIN_ROLES, MEMBER_ROLES, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError
from ..users.model import User
from ..users.service import AuthService

TOKEN_COOKIE = "token"


def extract_token() -> Optional[str]:
    """Bearer token from the Authorization header, else from the token cookie."""

    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer"):
        parts = header.split(" ", 1)
        token = parts[1].strip() if len(parts) == 2 else ""
        return token or None
    return request.cookies.get(TOKEN_COOKIE) or None


def current_user() -> Optional[User]:
    return g.get("current_user")


def require_current_user() -> User:
    user = current_user()
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


class Guards:
    """Route decorators that attach the caller's identity to `flask.g`."""

    def __init__(self, auth: AuthService):
        self._auth = auth

    def _resolve(self) -> User:
        token = extract_token()
        if not token:
            raise AuthenticationError("Not authorized, no token")
        return self._auth.resolve_token(token)

    def require_auth(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = self._resolve()
            return view(*args, **kwargs)

        return wrapper

    def optional_auth(self, view):
        """Attach the identity when a valid token is present; otherwise stay anonymous."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = None
            if extract_token():
                try:
                    g.current_user = self._resolve()
                except DomainError:
                    g.current_user = None
            return view(*args, **kwargs)

        return wrapper

    def require_roles(self, *roles: Role):
        allowed = tuple(roles)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = self._resolve()
                check_role(user, allowed)
                g.current_user = user
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def require_member(self, view):
        return self.require_roles(*sorted(MEMBER_ROLES, key=_role_order))(view)

    def require_admin(self, view):
        return self.require_roles(*sorted(ADMIN_ROLES, key=_role_order))(view)


def _role_order(role: Role) -> int:
    return list(Role).index(role)


def check_role(user: User, allowed: Iterable[Role]) -> None:
    allowed = tuple(allowed)
    if user.role not in allowed:
        names = " or ".join(r.value for r in allowed)
        raise AuthorizationError(f"Access denied. Required role: {names}")
