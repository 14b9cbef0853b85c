from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import HALF_DAY_WEIGHT


@dataclass(frozen=True)
class AttendanceCounts:
    """Per-employee counts over a date range. Derived, never persisted."""

    present_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    late_markings: int = 0

    @property
    def payable_days(self) -> Decimal:
        return Decimal(self.present_days) + HALF_DAY_WEIGHT * Decimal(self.half_days)

    def as_dict(self) -> dict:
        return {
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "halfDays": self.half_days,
            "lateMarkings": self.late_markings,
            "payableDays": _num(self.payable_days),
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    payable_days: Decimal
    prorated_basic: Decimal
    prorated_special_allowance: Decimal
    prorated_conveyance: Decimal
    overtime: Decimal
    gross_salary: Decimal
    epf_deduction: Decimal
    esic_deduction: Decimal
    deductions: Decimal
    net_salary: Decimal
    remaining_paid_leaves: int

    def as_dict(self) -> dict:
        return {
            "payableDays": _num(self.payable_days),
            "remainingPaidLeaves": self.remaining_paid_leaves,
            "proratedBasic": str(self.prorated_basic),
            "proratedSpecialAllowance": str(self.prorated_special_allowance),
            "proratedConveyance": str(self.prorated_conveyance),
            "overtime": str(self.overtime),
            "grossSalary": str(self.gross_salary),
            "epfDeduction": str(self.epf_deduction),
            "esicDeduction": str(self.esic_deduction),
            "deductions": str(self.deductions),
            "netSalary": str(self.net_salary),
        }


def _num(value: Decimal):
    # 21 stays an int on the wire, 20.5 stays a float.
    return int(value) if value == value.to_integral_value() else float(value)
