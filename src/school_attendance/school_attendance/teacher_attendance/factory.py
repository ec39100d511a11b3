from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .strategies.base import CheckinStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class CheckinStrategyFactory:
    """Factory Pattern: choose the check-in strategy for the time of the scan."""

    def for_checkin(self, *, now: datetime, cutoff: time) -> CheckinStrategy:
        if now <= datetime.combine(now.date(), cutoff):
            return PresentStrategy()
        return LateStrategy()
