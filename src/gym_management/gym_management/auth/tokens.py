from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Optional[Role]


class TokenService:
    """Issues and verifies the bearer tokens handed to both SPAs."""

    def __init__(self, secret: str, *, expires_days: int = DEFAULT_TOKEN_DAYS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires = timedelta(days=int(expires_days))

    @property
    def max_age_seconds(self) -> int:
        return int(self._expires.total_seconds())

    def issue(self, *, user_id: int, role: Role, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role.value,
            "iat": issued,
            "exp": issued + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        try:
            data = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Not authorized, token failed")

        try:
            user_id = int(data["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

        role = data.get("role")
        try:
            parsed_role = Role(role) if role else None
        except ValueError:
            parsed_role = None
        return TokenClaims(user_id=user_id, role=parsed_role)
