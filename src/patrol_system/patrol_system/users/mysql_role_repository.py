from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_list
from .repository import RoleRepository
from .role_model import Role


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role, permissions_json, description FROM roles ORDER BY role")
            return [
                Role(
                    role=r["role"],
                    permissions=tuple(load_json_list(r["permissions_json"])),
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]

    def get(self, role: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role, permissions_json, description FROM roles WHERE role=%s", (role,))
            r = fetchone(cur)
            if not r:
                return None
            return Role(
                role=r["role"],
                permissions=tuple(load_json_list(r["permissions_json"])),
                description=r.get("description"),
            )
