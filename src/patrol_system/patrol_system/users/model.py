from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: a guard or administrator account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    username: str
    password_hash: str
    role: str
    is_active: bool = True
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "UserId": self.user_id,
            "Name": self.name,
            "Username": self.username,
            "Role": self.role,
            "IsActive": self.is_active,
            "Phone": self.phone,
            "CreatedAt": self.created_at.isoformat() if self.created_at else None,
            "LastLoginAt": self.last_login_at.isoformat() if self.last_login_at else None,
        }
