from __future__ import annotations

from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Absent or half day: no arrival time is kept, so never late."""

    def decide(self, *, status: AttendanceStatus, time_in: Optional[time]) -> StatusDecision:
        return StatusDecision(status=status, time_in=None, is_late=False)
