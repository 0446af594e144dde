"""Core rate conversions, exceptions and infrastructure."""

from .exceptions import (
    AllocationError,
    InvalidParameterError,
    InvestPlanError,
)
from investplan.domain.calculator.rates import (
    cagr,
    effective_annual_rate,
    nominal_rate,
    real_rate,
    years_to_double,
    years_to_multiplier,
)

__all__ = [
    "cagr",
    "real_rate",
    "nominal_rate",
    "effective_annual_rate",
    "years_to_double",
    "years_to_multiplier",
    # Exceptions
    "InvestPlanError",
    "InvalidParameterError",
    "AllocationError",
]
