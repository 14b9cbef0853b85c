from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import EPF_RATE, ESIC_RATE, PRORATION_BASE_DAYS, WORK_HOURS_PER_DAY
from ...users.model import SalaryConfig
from ..model import AttendanceCounts, SalaryBreakdown
from .base import PayrollCalculator

_CENTS = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: components prorated over a fixed 30-day month.

    EPF is taken on prorated basic, ESIC on gross. Overtime is not tracked
    yet, so it is always zero; ``hourly_rate`` is what it would be paid at.
    """

    def hourly_rate(self, config: SalaryConfig) -> Decimal:
        return money(Decimal(config.basic_salary) / PRORATION_BASE_DAYS / WORK_HOURS_PER_DAY)

    def compute_salary(self, config: SalaryConfig, counts: AttendanceCounts) -> SalaryBreakdown:
        payable = counts.payable_days

        def prorate(amount: Decimal) -> Decimal:
            return Decimal(amount or 0) / PRORATION_BASE_DAYS * payable

        # Totals come from the unrounded components; cents only on the way out.
        basic = prorate(config.basic_salary)
        special = prorate(config.special_allowance)
        conveyance = prorate(config.conveyance)
        overtime = Decimal(0)

        gross = basic + special + conveyance + overtime
        epf = basic * EPF_RATE if config.epf else Decimal(0)
        esic = gross * ESIC_RATE if config.esic else Decimal(0)

        leaves_taken = counts.absent_days + counts.half_days
        return SalaryBreakdown(
            payable_days=payable,
            prorated_basic=money(basic),
            prorated_special_allowance=money(special),
            prorated_conveyance=money(conveyance),
            overtime=money(overtime),
            gross_salary=money(gross),
            epf_deduction=money(epf),
            esic_deduction=money(esic),
            deductions=money(epf + esic),
            net_salary=money(gross - epf - esic),
            remaining_paid_leaves=max(0, int(config.paid_leaves or 0) - leaves_taken),
        )
