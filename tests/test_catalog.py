from __future__ import annotations

import pytest

from solar_designer.design.catalog import (
    Availability,
    BatteryOption,
    InMemoryEquipmentCatalog,
    PanelOption,
    default_catalog,
)
from solar_designer.design.requirements import Budget, requirements_from_dict
from solar_designer.design.scoring import reliability_score, score_variant
from solar_designer.errors import ValidationError
from solar_designer.simulation.models import ModuleType


def test_default_catalog_covers_every_type():
    catalog = default_catalog()

    for panel_type in ("monocrystalline", "polycrystalline", "thin-film"):
        assert catalog.get_panels(panel_type=panel_type, availability="in-stock")
    for inverter_type in ("string", "power-optimizer", "micro"):
        assert catalog.get_inverters(inverter_type=inverter_type, availability="in-stock")
    assert len(catalog.get_batteries(availability="in-stock")) == 2


def test_panel_filters():
    catalog = default_catalog()

    assert all(p.wattage >= 410 for p in catalog.get_panels(min_wattage=410))
    assert all(p.efficiency >= 21 for p in catalog.get_panels(min_efficiency=21))
    assert all(p.tier == 1 for p in catalog.get_panels(tier=1))
    cheap = catalog.get_panels(max_price_per_watt=0.45)
    assert {p.id for p in cheap} == {"trina-honey-m-330-poly", "first-solar-series-6-460"}


def test_option_round_trip_through_dict():
    panel = default_catalog().panels[0]
    data = panel.to_dict()

    assert data["panel_type"] == "monocrystalline"
    assert isinstance(data["certifications"], list)
    assert PanelOption.from_dict(data) == panel


def test_option_from_dict_coerces_enums_and_ignores_unknown_keys():
    panel = PanelOption.from_dict(
        {
            "id": "x",
            "manufacturer": "Acme",
            "model": "A1",
            "panel_type": "thin-film",
            "wattage": 300,
            "efficiency": 18,
            "price_per_watt": 0.5,
            "availability": "limited",
            "colour": "black",
        }
    )
    assert panel.panel_type is ModuleType.THIN_FILM
    assert panel.availability is Availability.LIMITED
    assert panel.name == "Acme A1"
    assert panel.area_m2 == pytest.approx(2.0)


def test_catalog_ignores_unavailable_items():
    limited = BatteryOption(
        id="b", manufacturer="Acme", model="B", capacity_kwh=10, power_kw=5,
        price_per_kwh=500, availability=Availability.LIMITED,
    )
    catalog = InMemoryEquipmentCatalog.from_iterables(batteries=[limited])
    assert catalog.get_batteries(availability="in-stock") == []
    assert catalog.get_batteries() == [limited]


def test_reliability_score():
    catalog = default_catalog()
    rec = next(p for p in catalog.panels if p.id == "rec-alpha-pure-405")
    trina = next(p for p in catalog.panels if p.id == "trina-honey-m-330-poly")
    enphase = next(i for i in catalog.inverters if i.id == "enphase-iq8plus")
    solaredge = next(i for i in catalog.inverters if i.id == "solaredge-hd-wave-7600")

    assert reliability_score(rec, solaredge) == 40 + 20 + 15 + 10
    assert reliability_score(trina, enphase) == 30 + 20 + 20 + 5


def test_score_variant_axes():
    catalog = default_catalog()
    panel = catalog.panels[0]
    inverter = catalog.inverters[0]

    score = score_variant(
        total_cost=15_000.0,
        offset_percentage=90.0,
        offset_goal=100.0,
        panel=panel,
        inverter=inverter,
        budget=Budget(max=30_000.0),
    )
    assert score.cost == 50.0
    assert score.performance == 90.0
    assert score.aesthetics == round(panel.efficiency * 2)
    expected = 0.3 * 50 + 0.4 * 90 + 0.1 * panel.efficiency * 2 + 0.2 * score.reliability
    assert score.overall == round(expected)


def test_score_without_budget_and_over_budget():
    catalog = default_catalog()
    panel, inverter = catalog.panels[0], catalog.inverters[0]

    unbudgeted = score_variant(
        total_cost=20_000.0, offset_percentage=100.0, offset_goal=100.0, panel=panel, inverter=inverter
    )
    assert unbudgeted.cost == 33.0

    over = score_variant(
        total_cost=50_000.0,
        offset_percentage=120.0,
        offset_goal=100.0,
        panel=panel,
        inverter=inverter,
        budget=Budget(max=30_000.0),
    )
    assert over.cost == 0.0
    assert over.performance == 100.0


def test_requirements_from_dict(design_payload):
    requirements = requirements_from_dict(design_payload)

    assert requirements.annual_usage == pytest.approx(8_400.0)
    assert requirements.goals.offset_percentage == 100.0
    assert requirements.preferences.roof_constraints.available_area == 60.0
    assert requirements.utility_rates.effective_net_metering_rate == 0.25
    requirements.validate()


@pytest.mark.parametrize(
    ("changes", "field"),
    [
        ({"monthly_usage": [0.0] * 12}, "monthly_usage"),
        ({"monthly_usage": [700.0] * 11 + [-1.0]}, "monthly_usage"),
        ({"budget": {"min": 20_000, "max": 10_000}}, "budget.min"),
        ({"preferences": {"design_goals": {"offset_percentage": 0}}}, "offset_percentage"),
        ({"preferences": {"roof_constraints": {"shading_factor": 120}}}, "shading_factor"),
        ({"preferences": {"storage_capacity": -5}}, "storage_capacity"),
        ({"utility_rates": {"energy_rate": 0}}, "energy_rate"),
        ({"location": {"latitude": 95, "longitude": 0}}, "latitude"),
    ],
)
def test_requirements_validation(design_payload, changes, field):
    requirements = requirements_from_dict({**design_payload, **changes})
    with pytest.raises(ValidationError) as excinfo:
        requirements.validate()
    assert excinfo.value.field == field


def test_requirements_from_dict_rejects_malformed_input(design_payload):
    payload = {key: value for key, value in design_payload.items() if key != "monthly_usage"}
    with pytest.raises(ValidationError, match="monthly_usage"):
        requirements_from_dict(payload)

    with pytest.raises(ValidationError):
        requirements_from_dict({**design_payload, "preferences": {"panel_type": "perovskite"}})

    with pytest.raises(ValidationError):
        requirements_from_dict({**design_payload, "budget": {"ceiling": 10}})
