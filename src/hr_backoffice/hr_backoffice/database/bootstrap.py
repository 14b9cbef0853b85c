from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_demo_identities(db_config: Mapping) -> None:
    """Upsert one identity per role so a fresh database can be logged into."""

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(email: str, password: str, **fields) -> int:
            fields["password_hash"] = generate_password_hash(password)
            cur.execute("SELECT identity_id FROM identities WHERE email=%s", (email,))
            existing = cur.fetchone()
            columns = sorted(fields)
            if existing:
                assignments = ", ".join(f"{c}=%s" for c in columns)
                cur.execute(
                    f"UPDATE identities SET {assignments}, is_active=1 WHERE identity_id=%s",
                    tuple(fields[c] for c in columns) + (existing["identity_id"],),
                )
                return int(existing["identity_id"])
            cur.execute(
                f"INSERT INTO identities (email, {', '.join(columns)}) VALUES (%s, {', '.join(['%s'] * len(columns))})",
                (email,) + tuple(fields[c] for c in columns),
            )
            return int(cur.lastrowid)

        upsert("admin@example.com", "admin123", name="Admin Demo", role="admin", mobile="9000000001")
        upsert("hr@example.com", "hr12345", name="HR Demo", role="hr", mobile="9000000002")
        supervisor_id = upsert(
            "supervisor@example.com",
            "super123",
            name="Supervisor Demo",
            role="supervisor",
            emp_id="SUP-001",
            shift_start="09:00:00",
        )
        upsert(
            "employee@example.com",
            "emp12345",
            name="Employee Demo",
            role="employee",
            emp_id="EMP-001",
            designation="Operator",
            department="Operations",
            shift_start="09:00:00",
            supervisor_id=supervisor_id,
            basic_salary=30000,
            special_allowance=3000,
            conveyance=1000,
            epf=1,
            esic=0,
            paid_leaves=2,
        )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo identities ready")


def list_tables(db_config: Mapping) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
