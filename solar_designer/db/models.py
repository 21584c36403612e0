"""
SQLAlchemy models for the equipment catalog and the run history.

Each equipment row keeps a handful of indexed columns used for filtering
plus the full option record in the ``specs`` JSON column, which is what the
catalog loader reads back.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    func,
)

from .session import Base


class TimestampMixin:
    """
    Adds ``created_at`` (set on insert) and ``updated_at`` (refreshed on
    every update) columns.
    """

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class PanelModel(Base, TimestampMixin):
    """
    PV module in the catalog.

    Attributes:
        id: Primary key.
        catalog_id: Stable slug, unique (upsert key).
        manufacturer: Manufacturer name.
        model: Model designation.
        panel_type: monocrystalline / polycrystalline / thin-film.
        wattage: STC rating (W).
        efficiency: Module efficiency (%).
        tier: Manufacturer tier.
        availability: in-stock / limited / discontinued.
        specs: Complete PanelOption as JSON.
    """

    __tablename__ = "panels"

    id = Column(Integer, primary_key=True)
    catalog_id = Column(String(128), unique=True, nullable=False)
    manufacturer = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    panel_type = Column(String(32), nullable=False, index=True)
    wattage = Column(Float, nullable=False)
    efficiency = Column(Float, nullable=False)
    tier = Column(Integer, nullable=False, default=1)
    availability = Column(String(32), nullable=False, index=True)
    specs = Column(JSON, nullable=False)


class InverterModel(Base, TimestampMixin):
    """Inverter in the catalog; ``capacity_w`` is the AC rating per unit."""

    __tablename__ = "inverters"

    id = Column(Integer, primary_key=True)
    catalog_id = Column(String(128), unique=True, nullable=False)
    manufacturer = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    inverter_type = Column(String(32), nullable=False, index=True)
    capacity_w = Column(Float, nullable=False)
    cec_efficiency = Column(Float, nullable=False)
    availability = Column(String(32), nullable=False, index=True)
    specs = Column(JSON, nullable=False)


class BatteryModel(Base, TimestampMixin):
    """Storage unit in the catalog."""

    __tablename__ = "batteries"

    id = Column(Integer, primary_key=True)
    catalog_id = Column(String(128), unique=True, nullable=False)
    manufacturer = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    technology = Column(String(64), nullable=False)
    capacity_kwh = Column(Float, nullable=False)
    availability = Column(String(32), nullable=False, index=True)
    specs = Column(JSON, nullable=False)


class DesignRunRecord(Base, TimestampMixin):
    """
    History of simulation and design runs.

    Attributes:
        id: Primary key.
        run_type: ``"simulation"`` or ``"design"``.
        label: Descriptive name (design id or user label).
        request: Input payload as JSON.
        summary: Key metrics as JSON.
        output_dir: Directory with exported artifacts, when saved.
        notes: Free text.
    """

    __tablename__ = "design_runs"

    id = Column(Integer, primary_key=True)
    run_type = Column(String(32), nullable=False, index=True)
    label = Column(String(255), nullable=False)
    request = Column(JSON, nullable=False)
    summary = Column(JSON, nullable=False)
    output_dir = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
