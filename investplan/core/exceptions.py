"""Custom exceptions for investplan.

Domain-specific exception types for better error handling and debugging.
Numeric edge cases (zero duration, total loss, zero base) are NOT errors:
the calculators return sentinel values for them.
"""

from __future__ import annotations

from typing import Any


class InvestPlanError(Exception):
    """Base exception for all investplan errors."""
    pass


# --- Input Errors ---

class InvalidParameterError(InvestPlanError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class AllocationError(InvestPlanError):
    """Allocation set cannot be normalized or projected."""
    pass
