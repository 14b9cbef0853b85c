from __future__ import annotations

from abc import ABC, abstractmethod

from ...users.model import SalaryConfig
from ..model import AttendanceCounts, SalaryBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute_salary(self, config: SalaryConfig, counts: AttendanceCounts) -> SalaryBreakdown:
        raise NotImplementedError
