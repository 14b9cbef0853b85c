from __future__ import annotations

from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Present within the grace window (or no shift start to compare against)."""

    def decide(self, *, status: AttendanceStatus, time_in: Optional[time]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, time_in=time_in, is_late=False)
