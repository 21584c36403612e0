from __future__ import annotations

import numpy as np
import pytest

from solar_designer.errors import ValidationError
from solar_designer.simulation.financial import (
    FinancialOptions,
    _npv,
    analyze,
    escalated_savings,
)


def test_defaults():
    options = FinancialOptions()
    assert options.electricity_rate == 0.12
    assert options.annual_rate_increase == 3.0
    assert options.system_lifetime == 25
    assert options.discount_rate == 6.0
    assert options.federal_tax_credit == 30.0
    assert options.state_tax_credit == 0.0
    assert options.cost_per_watt == 3.0
    assert options.effective_net_metering_rate == 0.12


def test_from_dict_overrides_and_ignores_unknown_keys():
    options = FinancialOptions.from_dict(
        {"electricity_rate": 0.2, "system_lifetime": "20", "discount_rate": None, "colour": "red"}
    )
    assert options.electricity_rate == 0.2
    assert options.system_lifetime == 20
    assert options.discount_rate == 6.0


def test_net_metering_rate_overrides_electricity_rate():
    options = FinancialOptions(electricity_rate=0.2, net_metering_rate=0.08)
    assert options.effective_net_metering_rate == 0.08

    result = analyze(5.0, 7_000.0, options)
    assert result.annual_savings == pytest.approx(7_000.0 * 0.08)


def test_escalated_savings():
    savings = escalated_savings(1_000.0, 3.0, 3)
    np.testing.assert_allclose(savings, [1_000.0, 1_030.0, 1_060.9])


def test_npv_discounts_from_year_zero():
    cashflows = np.array([-100.0, 110.0])
    assert _npv(0.10, cashflows) == pytest.approx(0.0)


def test_analyze_cost_and_incentives():
    result = analyze(10.0, 14_000.0, FinancialOptions(state_tax_credit=10.0))

    assert result.system_cost == pytest.approx(30_000.0)
    assert result.incentives == pytest.approx(12_000.0)
    assert result.net_cost == pytest.approx(18_000.0)
    assert result.annual_savings == pytest.approx(1_680.0)
    assert result.payback_period == pytest.approx(18_000.0 / 1_680.0)
    assert result.lcoe == pytest.approx(18_000.0 / (14_000.0 * 25))


def test_analyze_lifetime_savings_and_npv():
    options = FinancialOptions(annual_rate_increase=0.0, discount_rate=0.0, system_lifetime=10)
    result = analyze(1.0, 1_000.0, options)

    assert result.total_lifetime_savings == pytest.approx(1_200.0)
    assert result.npv == pytest.approx(1_200.0 - 2_100.0)
    assert result.roi == pytest.approx((1_200.0 - 2_100.0) / 2_100.0 * 100.0)
    assert result.system_lifetime == 10


def test_escalation_raises_npv():
    flat = analyze(10.0, 14_000.0, FinancialOptions(annual_rate_increase=0.0))
    rising = analyze(10.0, 14_000.0, FinancialOptions(annual_rate_increase=5.0))
    assert rising.npv > flat.npv
    assert rising.total_lifetime_savings > flat.total_lifetime_savings


def test_zero_production_is_serializable():
    result = analyze(5.0, 0.0)
    assert result.payback_period == 25.0
    assert result.lcoe == 0.0
    assert result.annual_savings == 0.0


@pytest.mark.parametrize(
    ("options", "field"),
    [
        (FinancialOptions(electricity_rate=-0.1), "electricity_rate"),
        (FinancialOptions(net_metering_rate=0.0), "net_metering_rate"),
        (FinancialOptions(system_lifetime=0), "system_lifetime"),
        (FinancialOptions(federal_tax_credit=-5.0), "federal_tax_credit"),
        (FinancialOptions(federal_tax_credit=60.0, state_tax_credit=40.0), "state_tax_credit"),
        (FinancialOptions(cost_per_watt=0.0), "cost_per_watt"),
    ],
)
def test_invalid_options(options, field):
    with pytest.raises(ValidationError) as excinfo:
        options.validate()
    assert excinfo.value.field == field
