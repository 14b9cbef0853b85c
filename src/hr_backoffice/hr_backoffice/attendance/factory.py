from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import minute_of_day
from ..core.enums import AttendanceStatus
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_mark(
        self,
        *,
        status: AttendanceStatus,
        time_in: Optional[time],
        shift_start: Optional[time],
        grace_minutes: int,
    ) -> AttendanceStrategy:
        if status != AttendanceStatus.PRESENT:
            return AbsentStrategy()
        if shift_start is None or time_in is None:
            return NormalStrategy()

        if minute_of_day(time_in) - minute_of_day(shift_start) > grace_minutes:
            return LateStrategy()
        return NormalStrategy()
