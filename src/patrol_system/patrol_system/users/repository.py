from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import User
from .role_model import Role


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        role: str,
        is_active: bool = True,
        phone: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        username: str,
        role: str,
        is_active: bool,
        phone: Optional[str],
        password_hash: Optional[str] = None,
    ) -> bool:
        """password_hash=None keeps the current hash."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int, at: datetime) -> None:
        raise NotImplementedError


class RoleRepository(Protocol):
    def list_all(self) -> Sequence[Role]:
        raise NotImplementedError

    def get(self, role: str) -> Optional[Role]:
        raise NotImplementedError
