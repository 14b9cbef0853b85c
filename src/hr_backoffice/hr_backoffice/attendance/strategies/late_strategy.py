from __future__ import annotations

from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Present, but past shift start plus grace."""

    def decide(self, *, status: AttendanceStatus, time_in: Optional[time]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, time_in=time_in, is_late=True)
