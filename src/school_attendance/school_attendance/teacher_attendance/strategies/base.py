from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time

from ...core.enums import TeacherAttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: TeacherAttendanceStatus


class CheckinStrategy(ABC):
    """Strategy Pattern: decide a teacher's status for a check-in."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, cutoff: time) -> StatusDecision:
        raise NotImplementedError
