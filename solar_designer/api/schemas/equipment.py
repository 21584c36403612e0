"""
Equipment catalog schemas for API validation.

Create schemas mirror the catalog option records (``PanelOption``,
``InverterOption``, ``BatteryOption``) and are converted to them before
storage. Response schemas are read from the ORM rows; the full option record
is returned in ``specs``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...design.catalog import Availability
from ...simulation.models import InverterType, ModuleType


class PanelCreate(BaseModel):
    """
    Schema for creating or updating a PV module (upsert on ``id``).

    Example:
        ```python
        # POST /api/panels
        {
            "id": "rec-alpha-405",
            "manufacturer": "REC",
            "model": "Alpha Pure 405",
            "panel_type": "monocrystalline",
            "wattage": 405,
            "efficiency": 21.9,
            "price_per_watt": 0.62
        }
        ```
    """

    id: str = Field(..., min_length=1, description="Catalog identifier used for upsert matching")
    manufacturer: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    panel_type: ModuleType
    wattage: float = Field(..., gt=0, description="STC rating per module (W)")
    efficiency: float = Field(..., gt=0, le=50, description="Module efficiency (%)")
    price_per_watt: float = Field(..., gt=0, description="Equipment price (USD/W)")
    length_mm: float = Field(2000.0, gt=0)
    width_mm: float = Field(1000.0, gt=0)
    thickness_mm: float = Field(35.0, gt=0)
    weight_kg: float = Field(22.0, gt=0)
    temperature_coefficient: float = -0.35
    performance_warranty_years: int = Field(25, ge=0)
    product_warranty_years: int = Field(12, ge=0)
    certifications: List[str] = Field(default_factory=list)
    availability: Availability = Availability.IN_STOCK
    tier: int = Field(1, ge=1, le=3)


class PanelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    catalog_id: str
    manufacturer: str
    model: str
    panel_type: str
    wattage: float
    efficiency: float
    tier: int
    availability: str
    specs: Dict[str, Any]
    created_at: Optional[datetime] = None


class InverterCreate(BaseModel):
    """Schema for creating or updating an inverter (upsert on ``id``)."""

    id: str = Field(..., min_length=1, description="Catalog identifier used for upsert matching")
    manufacturer: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    inverter_type: InverterType
    capacity_w: float = Field(..., gt=0, description="AC rating of one unit (W)")
    cec_efficiency: float = Field(..., gt=0, le=100, description="CEC weighted efficiency (%)")
    price_per_watt: float = Field(..., gt=0, description="Equipment price (USD/W)")
    peak_efficiency: Optional[float] = Field(None, gt=0, le=100)
    euro_efficiency: Optional[float] = Field(None, gt=0, le=100)
    input_voltage_min: Optional[float] = None
    input_voltage_max: Optional[float] = None
    mppt_channels: int = Field(1, ge=1)
    monitoring: bool = True
    warranty_years: int = Field(10, ge=0)
    availability: Availability = Availability.IN_STOCK


class InverterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    catalog_id: str
    manufacturer: str
    model: str
    inverter_type: str
    capacity_w: float
    cec_efficiency: float
    availability: str
    specs: Dict[str, Any]
    created_at: Optional[datetime] = None


class BatteryCreate(BaseModel):
    """Schema for creating or updating a storage unit (upsert on ``id``)."""

    id: str = Field(..., min_length=1, description="Catalog identifier used for upsert matching")
    manufacturer: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    capacity_kwh: float = Field(..., gt=0, description="Usable energy per unit (kWh)")
    power_kw: float = Field(..., gt=0)
    price_per_kwh: float = Field(..., gt=0, description="Equipment price (USD/kWh)")
    technology: str = "lithium-ion"
    round_trip_efficiency: float = Field(90.0, gt=0, le=100)
    cycle_life: int = Field(4000, ge=0)
    warranty_years: int = Field(10, ge=0)
    warranty_cycles: Optional[int] = None
    warranty_capacity_pct: Optional[float] = None
    weight_kg: Optional[float] = None
    availability: Availability = Availability.IN_STOCK


class BatteryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    catalog_id: str
    manufacturer: str
    model: str
    technology: str
    capacity_kwh: float
    availability: str
    specs: Dict[str, Any]
    created_at: Optional[datetime] = None


class SeedResponse(BaseModel):
    panels: int
    inverters: int
    batteries: int
