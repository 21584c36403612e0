"""
Pydantic schemas for API request/response validation.

- equipment: panel, inverter and battery catalog schemas
- simulation: simulate/design requests, their responses and run history
"""

from __future__ import annotations

from .equipment import (
    BatteryCreate,
    BatteryResponse,
    InverterCreate,
    InverterResponse,
    PanelCreate,
    PanelResponse,
    SeedResponse,
)
from .simulation import (
    DesignRequest,
    DesignResponse,
    DesignRunResponse,
    SimulationRequest,
    SimulationResponse,
)

__all__ = [
    "PanelCreate",
    "PanelResponse",
    "InverterCreate",
    "InverterResponse",
    "BatteryCreate",
    "BatteryResponse",
    "SeedResponse",
    "SimulationRequest",
    "SimulationResponse",
    "DesignRequest",
    "DesignResponse",
    "DesignRunResponse",
]
