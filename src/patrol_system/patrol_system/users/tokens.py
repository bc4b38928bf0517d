from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthenticationError
from .model import User
from .permissions import has_permission

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Identity decoded from a bearer token."""

    user_id: int
    username: str
    name: str
    role: str
    permissions: tuple[str, ...]

    def can(self, permission: str) -> bool:
        return has_permission(self.permissions, permission)

    def to_dict(self) -> dict:
        return {
            "UserId": self.user_id,
            "Username": self.username,
            "Name": self.name,
            "Role": self.role,
            "permissions": list(self.permissions),
        }


class TokenService:
    """Issues and verifies HS256 JWTs."""

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_TOKEN_HOURS, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))
        self._algorithm = algorithm

    def issue(self, user: User, permissions: Iterable[str], *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "username": user.username,
            "name": user.name,
            "role": user.role,
            "permissions": list(permissions),
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Session expired, please log in again")
        except jwt.InvalidTokenError as e:
            log.debug("Rejected token: %s", e)
            raise AuthenticationError("Invalid token")

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                username=str(payload["username"]),
                name=str(payload.get("name") or payload["username"]),
                role=str(payload["role"]),
                permissions=tuple(payload.get("permissions") or ()),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
