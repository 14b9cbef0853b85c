from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, normalize_day
from ..common.validators import require_int
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..users.model import Identity
from ..users.repository import IdentityRepository
from .aggregator import MonthlyAggregator
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator

logger = logging.getLogger(__name__)

_REPORTED_ROLES = (Role.EMPLOYEE, Role.SUPERVISOR)


@dataclass(frozen=True)
class ReportData:
    start: date
    end: date
    rows: list[dict]


def _identity_columns(identity: Identity) -> dict:
    return {
        "employeeId": identity.identity_id,
        "name": identity.name,
        "empId": identity.emp_id,
        "designation": identity.designation,
        "department": identity.department or identity.company or "-",
    }


class PayrollReportService:
    def __init__(
        self,
        identities: IdentityRepository,
        aggregator: MonthlyAggregator,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._identities = identities
        self._aggregator = aggregator
        self._calculator = calculator or StandardPayrollCalculator()

    def _reported_identities(self) -> Sequence[Identity]:
        return self._identities.list_by_roles(_REPORTED_ROLES, active_only=True)

    def build_monthly_report(self, year, month) -> ReportData:
        year = require_int(year, "year")
        month = require_int(month, "month")
        start, end = month_bounds(year, month)

        people = self._reported_identities()
        counts = self._aggregator.aggregate([p.identity_id for p in people], start, end)

        rows = []
        for p in people:
            c = counts[p.identity_id]
            breakdown = self._calculator.compute_salary(p.salary, c)
            row = _identity_columns(p)
            row.update(c.as_dict())
            row.update(breakdown.as_dict())
            rows.append(row)

        logger.info("monthly report built for %04d-%02d (%d rows)", year, month, len(rows))
        return ReportData(start=start, end=end, rows=rows)

    def build_summary_report(self, start, end) -> ReportData:
        if not start or not end:
            raise ValidationError("startDate and endDate are required")
        start_day, end_day = normalize_day(start), normalize_day(end)

        people = self._reported_identities()
        counts = self._aggregator.aggregate([p.identity_id for p in people], start_day, end_day)

        rows = []
        for p in people:
            row = _identity_columns(p)
            row.update(counts[p.identity_id].as_dict())
            rows.append(row)
        return ReportData(start=start_day, end=end_day, rows=rows)
