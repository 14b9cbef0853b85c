from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import Identity, SalaryConfig
from .repository import IdentityRepository

_COLUMNS = """
    identity_id, name, email, mobile, password_hash, role, emp_id, designation,
    department, company, shift_start, supervisor_id, is_active,
    basic_salary, special_allowance, conveyance, epf, esic, paid_leaves
"""


def _to_identity(r: dict) -> Identity:
    return Identity(
        identity_id=int(r["identity_id"]),
        name=r["name"],
        role=Role(r["role"]),
        email=r.get("email"),
        mobile=r.get("mobile"),
        password_hash=r.get("password_hash"),
        emp_id=r.get("emp_id"),
        designation=r.get("designation"),
        department=r.get("department"),
        company=r.get("company"),
        shift_start=normalize_mysql_time(r.get("shift_start")),
        supervisor_id=int(r["supervisor_id"]) if r.get("supervisor_id") is not None else None,
        is_active=bool(r.get("is_active", True)),
        salary=SalaryConfig(
            basic_salary=Decimal(str(r.get("basic_salary") or 0)),
            special_allowance=Decimal(str(r.get("special_allowance") or 0)),
            conveyance=Decimal(str(r.get("conveyance") or 0)),
            epf=bool(r.get("epf")),
            esic=bool(r.get("esic")),
            paid_leaves=int(r.get("paid_leaves") or 0),
        ),
    )


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, identity_id: int) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM identities WHERE identity_id=%s", (int(identity_id),))
            row = fetchone(cur)
            return _to_identity(row) if row else None

    def get_by_login(self, login: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM identities
                WHERE email=%s OR mobile=%s OR emp_id=%s
                ORDER BY identity_id
                LIMIT 1
                """,
                (login, login, login),
            )
            row = fetchone(cur)
            return _to_identity(row) if row else None

    def list_by_roles(self, roles: Iterable[Role], *, active_only: bool = True) -> Sequence[Identity]:
        role_sql, params = in_clause("role", [Role(r).value for r in roles])
        clauses = [role_sql]
        if active_only:
            clauses.append("is_active=1")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM identities WHERE {' AND '.join(clauses)} ORDER BY identity_id",
                tuple(params),
            )
            return [_to_identity(r) for r in fetchall(cur)]

    def list_assigned(self, supervisor_id: int) -> Sequence[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM identities WHERE supervisor_id=%s ORDER BY identity_id",
                (int(supervisor_id),),
            )
            return [_to_identity(r) for r in fetchall(cur)]
