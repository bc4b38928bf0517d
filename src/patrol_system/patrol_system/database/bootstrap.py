from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from werkzeug.security import generate_password_hash

from ..core.constants import BUILTIN_ADMIN_USERNAME
from .connection import DatabaseConnection

log = logging.getLogger(__name__)

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must not pin a database name; DB_NAME decides.
    return _CREATE_DB_OR_USE.sub("", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings and '--' comments."""
    buf: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            buf.append(ch)
            if ch == "\\" and i + 1 < len(sql):
                buf.append(sql[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
            buf.append(ch)
        elif ch == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end < 0 else end
            continue
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
        else:
            buf.append(ch)
        i += 1

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn_factory: DatabaseConnection, sql: str) -> int:
    conn = conn_factory.connect()
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
            count += 1
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    return count


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)
    count = _run_script(conn_factory, Path(schema_path).read_text(encoding="utf-8"))
    log.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(conn_factory: DatabaseConnection, *, seed_path: str | Path) -> None:
    count = _run_script(conn_factory, Path(seed_path).read_text(encoding="utf-8"))
    log.info("Applied seed %s (%d statements)", seed_path, count)


def ensure_admin_user(conn_factory: DatabaseConnection, *, password: str) -> bool:
    """Create the built-in admin account if missing. Returns True when created."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT user_id FROM users WHERE username=%s", (BUILTIN_ADMIN_USERNAME,))
        if cur.fetchone():
            return False
        cur.execute(
            """
            INSERT INTO users (name, username, password_hash, role, is_active)
            VALUES (%s, %s, %s, %s, 1)
            """,
            ("Super Admin", BUILTIN_ADMIN_USERNAME, generate_password_hash(password), "Admin"),
        )
        conn.commit()
        log.info("Created built-in admin account '%s'", BUILTIN_ADMIN_USERNAME)
        return True
    finally:
        conn.close()


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
