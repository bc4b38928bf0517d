from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import utc_now
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import BUILTIN_ADMIN_USERNAME, MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import RoleRepository, UserRepository
from .role_model import Role
from .tokens import TokenClaims, TokenService

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User
    permissions: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "user": {
                "UserId": self.user.user_id,
                "Name": self.user.name,
                "Username": self.user.username,
                "Role": self.user.role,
                "permissions": list(self.permissions),
            },
        }


class AuthService:
    """Use case: authenticate a user and issue a bearer token."""

    def __init__(self, users: UserRepository, roles: RoleRepository, tokens: TokenService):
        self._users = users
        self._roles = roles
        self._tokens = tokens

    def authenticate(self, username: str, password: str, *, now: Optional[datetime] = None) -> LoginResult:
        username = username.strip() if isinstance(username, str) else ""
        password = password if isinstance(password, str) else ""
        user = self._users.get_by_username(username) if username else None
        if not user or not user.is_active:
            log.info("Login refused for '%s': unknown or inactive account", username)
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except (TypeError, ValueError):
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            log.info("Login refused for '%s': wrong password", username)
            raise AuthenticationError("Invalid username or password")

        role = self._roles.get(user.role)
        permissions = role.permissions if role else ()

        self._users.touch_last_login(user.user_id, now or utc_now())
        token = self._tokens.issue(user, permissions)
        log.info("User '%s' logged in (role=%s)", user.username, user.role)
        return LoginResult(token=token, user=user, permissions=tuple(permissions))

    def verify(self, token: str) -> TokenClaims:
        """Decode a bearer token, then re-read the account behind it.

        Deactivation, deletion and role changes take effect on the next
        request instead of when the token expires.
        """
        claims = self._tokens.verify(token)
        user = self._users.get_by_id(claims.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Account is inactive or no longer exists")

        role = self._roles.get(user.role)
        return TokenClaims(
            user_id=user.user_id,
            username=user.username,
            name=user.name,
            role=user.role,
            permissions=tuple(role.permissions) if role else (),
        )


class UserService:
    """Use case: manage guard/admin accounts."""

    def __init__(self, users: UserRepository, roles: RoleRepository):
        self._users = users
        self._roles = roles

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def list_roles(self) -> Sequence[Role]:
        return self._roles.list_all()

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_active_guard(self, user_id: int) -> User:
        """The acting account behind a token, re-read so deactivation takes effect immediately."""
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Account is inactive or no longer exists")
        return user

    def _require_role(self, role: str) -> str:
        role = require_non_empty(role, "Role")
        if not self._roles.get(role):
            raise ValidationError(f"Role '{role}' does not exist")
        return role

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password: str,
        role: str,
        phone: Optional[str] = None,
        is_active: bool = True,
    ) -> int:
        name = require_non_empty(name, "Name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = self._require_role(role)

        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")

        user_id = self._users.create_user(
            name=name,
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=bool(is_active),
            phone=str(phone or "").strip() or None,
        )
        log.info("Created user '%s' (id=%s, role=%s)", username, user_id, role)
        return user_id

    def update_user(
        self,
        *,
        user_id: int,
        name: Optional[str] = None,
        username: Optional[str] = None,
        role: Optional[str] = None,
        phone: Optional[str] = None,
        is_active: Optional[bool] = None,
        password: Optional[str] = None,
    ) -> User:
        """Partial update; fields left as None keep their current value."""
        current = self.get_user(user_id)

        new_name = require_non_empty(name, "Name") if name is not None else current.name
        new_username = require_non_empty(username, "Username") if username is not None else current.username
        new_role = self._require_role(role) if role is not None else current.role
        new_active = bool(is_active) if is_active is not None else current.is_active
        new_phone = (str(phone or "").strip() or None) if phone is not None else current.phone

        if current.username == BUILTIN_ADMIN_USERNAME:
            if new_username != current.username:
                raise ValidationError("The built-in admin account cannot be renamed")
            if not new_active:
                raise ValidationError("The built-in admin account cannot be deactivated")

        if new_username != current.username:
            other = self._users.get_by_username(new_username)
            if other and other.user_id != current.user_id:
                raise ConflictError("Username already exists")

        password_hash = None
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        self._users.update_user(
            user_id=current.user_id,
            name=new_name,
            username=new_username,
            role=new_role,
            is_active=new_active,
            phone=new_phone,
            password_hash=password_hash,
        )
        log.info("Updated user id=%s", current.user_id)
        return self.get_user(current.user_id)

    def delete_user(self, *, actor_user_id: int, user_id: int) -> None:
        user = self.get_user(user_id)
        if user.user_id == int(actor_user_id):
            raise ValidationError("You cannot delete your own account")
        if user.username == BUILTIN_ADMIN_USERNAME:
            raise ValidationError("The built-in admin account cannot be deleted")

        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("User not found")
        log.info("Deleted user '%s' (id=%s)", user.username, user.user_id)
