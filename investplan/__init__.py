"""
investplan - Investment Strategy Projection Engine

Growth and rate-conversion engine behind the investment planner.

Modules:
    - core: Logging, settings and exceptions
    - domain: Pydantic models and pure rate / growth calculators
    - application: Allocation projector, inflation adjuster, strategy aggregator
    - ui: Streamlit preview components
"""

__version__ = "1.4.0"
