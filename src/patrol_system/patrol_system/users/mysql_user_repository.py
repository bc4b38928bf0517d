from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, username, password_hash, role, is_active, phone, created_at, last_login_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=row["role"],
        is_active=bool(row.get("is_active", True)),
        phone=row.get("phone"),
        created_at=row.get("created_at"),
        last_login_at=row.get("last_login_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name ASC")
            return [_to_user(r) for r in fetchall(cur)]

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, username, password_hash, role, is_active, phone)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (name, username, password_hash, role, int(bool(is_active)), phone),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError:
            raise ConflictError("Username already exists")

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
        sets = ["name=%s", "username=%s", "role=%s", "is_active=%s", "phone=%s"]
        params: list[object] = [name, username, role, int(bool(is_active)), phone]
        if password_hash is not None:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(int(user_id))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", tuple(params))
                return cur.rowcount > 0
        except mysql_errors.IntegrityError:
            raise ConflictError("Username already exists")

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def touch_last_login(self, user_id: int, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login_at=%s WHERE user_id=%s", (at, int(user_id)))
