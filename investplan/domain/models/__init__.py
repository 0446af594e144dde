"""Data models for investplan."""

from .projection import AllocationProjection, Projection, ScheduleEntry
from .strategy import Allocation, Compounding, ContributionMode, Strategy

__all__ = [
    "Allocation",
    "AllocationProjection",
    "Compounding",
    "ContributionMode",
    "Projection",
    "ScheduleEntry",
    "Strategy",
]
