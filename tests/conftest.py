"""Pytest fixtures for investplan tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from investplan.domain.models import Allocation, Strategy


@pytest.fixture
def sample_allocations():
    """Two allocations already summing to 100."""
    return [
        Allocation(category="Stocks", percent=60, expected_annual_return=0.12),
        Allocation(category="Bonds", percent=40, expected_annual_return=0.07),
    ]


@pytest.fixture
def unbalanced_allocations():
    """Three allocations summing to 130."""
    return [
        Allocation(category="Stocks", percent=60, expected_annual_return=0.12),
        Allocation(category="Bonds", percent=40, expected_annual_return=0.07),
        Allocation(category="Gold", percent=30, expected_annual_return=0.06),
    ]


@pytest.fixture
def sample_strategy_data():
    """Raw strategy payload as it arrives from the API layer."""
    return {
        "name": "Retirement core",
        "mode": "lumpsum",
        "amount": 100000,
        "duration_years": 10,
        "compounding": "annually",
        "normalize_mode": False,
        "inflation_rate": 0.05,
        "currency": "INR",
        "allocations": [
            {"category": "Stocks", "percent": 60, "expected_annual_return": 0.12},
            {"category": "Bonds", "percent": 40, "expected_annual_return": 0.07},
        ],
    }


@pytest.fixture
def sample_strategy(sample_strategy_data):
    return Strategy(**sample_strategy_data)
