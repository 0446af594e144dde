"""Application services."""

from .aggregator import StrategyAggregator, normalize_allocations, project_strategy, validate_allocations
from .exporter import ResultExporter
from .inflation import InflationAdjuster
from .projector import AllocationProjector

__all__ = [
    "AllocationProjector",
    "InflationAdjuster",
    "ResultExporter",
    "StrategyAggregator",
    "normalize_allocations",
    "project_strategy",
    "validate_allocations",
]
