from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    time_in: Optional[time]
    is_late: bool = False


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how a mark turns into stored fields."""

    @abstractmethod
    def decide(self, *, status: AttendanceStatus, time_in: Optional[time]) -> StatusDecision:
        raise NotImplementedError
