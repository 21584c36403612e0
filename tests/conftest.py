from __future__ import annotations

import math
import pytest
from pathlib import Path
import sys

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from solar_designer.db.session import Base  # noqa: E402
from solar_designer.persistence import PersistenceService  # noqa: E402
from solar_designer.simulation.models import (  # noqa: E402
    InverterType,
    Location,
    ModuleType,
    SystemSpecification,
    TrackingType,
    weather_from_records,
)


@pytest.fixture()
def sqlite_session_factory():
    """Provide a session factory bound to an in-memory SQLite database."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    yield Session
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def persistence(sqlite_session_factory):
    """Provide a PersistenceService bound to the temporary SQLite DB."""
    return PersistenceService(session_factory=sqlite_session_factory)


def _build_weather_records(mean_ghi: float = 5.0, ghi_amplitude: float = 1.5) -> list[dict]:
    """Twelve months peaking mid-year: GHI mean ± amplitude, 10-30 °C ambient."""
    records = []
    for month in range(1, 13):
        phase = math.cos(2.0 * math.pi * (month - 6.5) / 12.0)
        records.append(
            {
                "month": month,
                "ghi": mean_ghi + ghi_amplitude * phase,
                "dni": 6.0,
                "dhi": 2.0,
                "ambient_temperature_c": 20.0 + 10.0 * phase,
                "wind_speed_ms": 3.0,
                "relative_humidity_pct": 60.0,
            }
        )
    return records


@pytest.fixture()
def weather_records() -> list[dict]:
    return _build_weather_records()


@pytest.fixture()
def weather(weather_records):
    return weather_from_records(weather_records)


@pytest.fixture()
def san_francisco() -> Location:
    return Location(latitude=37.7749, longitude=-122.4194)


@pytest.fixture()
def reference_spec() -> SystemSpecification:
    """10 kW monocrystalline string system facing south at 30°."""
    return SystemSpecification(
        dc_capacity_kw=10.0,
        module_efficiency_pct=20.0,
        inverter_efficiency_pct=96.0,
        system_losses_pct=14.0,
        tilt_deg=30.0,
        azimuth_deg=180.0,
        module_type=ModuleType.MONOCRYSTALLINE,
        tracking_type=TrackingType.FIXED,
        inverter_type=InverterType.STRING,
    )


@pytest.fixture()
def simulation_payload(weather_records) -> dict:
    return {
        "label": "sf-10kw",
        "location": {"latitude": 37.7749, "longitude": -122.4194},
        "system": {
            "dc_capacity_kw": 10.0,
            "module_efficiency_pct": 20.0,
            "inverter_efficiency_pct": 96.0,
            "system_losses_pct": 14.0,
            "tilt_deg": 30.0,
            "azimuth_deg": 180.0,
        },
        "weather": weather_records,
        "include_financial": True,
    }


@pytest.fixture()
def design_payload(weather_records) -> dict:
    """700 kWh/month household in San Francisco with a roof and a tariff."""
    return {
        "label": "sf-home",
        "location": {"latitude": 37.7749, "longitude": -122.4194},
        "monthly_usage": [700.0] * 12,
        "preferences": {
            "roof_constraints": {"available_area": 60.0},
        },
        "utility_rates": {"energy_rate": 0.25},
        "weather": weather_records,
    }
