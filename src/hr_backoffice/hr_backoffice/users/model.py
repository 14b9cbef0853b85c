from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SalaryConfig:
    """Salary components as configured on an identity (unset numbers are 0)."""

    basic_salary: Decimal = Decimal(0)
    special_allowance: Decimal = Decimal(0)
    conveyance: Decimal = Decimal(0)
    epf: bool = False
    esic: bool = False
    paid_leaves: int = 0


@dataclass(frozen=True)
class Identity:
    """Domain entity: any person known to the system.

    Admin, HR, supervisor and employee share one shape; role-specific fields
    (shift start, supervisor link, salary) are simply left empty when unused.
    """

    identity_id: int
    name: str
    role: Role
    email: Optional[str] = None
    mobile: Optional[str] = None
    password_hash: Optional[str] = None
    emp_id: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    company: Optional[str] = None
    shift_start: Optional[time] = None
    supervisor_id: Optional[int] = None
    is_active: bool = True
    salary: SalaryConfig = field(default_factory=SalaryConfig)
