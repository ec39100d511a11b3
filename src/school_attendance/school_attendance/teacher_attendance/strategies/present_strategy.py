from __future__ import annotations

from datetime import datetime, time

from ...core.enums import TeacherAttendanceStatus
from .base import CheckinStrategy, StatusDecision


class PresentStrategy(CheckinStrategy):
    """Check-in at or before the cutoff."""

    def decide_checkin(self, *, now: datetime, cutoff: time) -> StatusDecision:
        return StatusDecision(status=TeacherAttendanceStatus.PRESENT)
