from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from .design.catalog import EquipmentCatalog, default_catalog
from .design.optimizer import DesignResult, SystemDesigner
from .design.requirements import requirements_from_dict
from .errors import ValidationError
from .persistence import PersistenceService
from .result_builder import ResultBuilder
from .simulation.financial import FinancialOptions
from .simulation.models import (
    Location,
    ProductionResult,
    SimulationInput,
    SystemSpecification,
    weather_from_records,
)
from .simulation.production import ProductionSimulator

logger = logging.getLogger(__name__)


def parse_simulation_payload(payload: Mapping[str, Any]) -> SimulationInput:
    """
    Turn a decoded JSON payload into simulator inputs.

    Expected keys: ``location``, ``system``, ``weather`` and optionally
    ``include_financial`` and ``financial_options``.

    Raises:
        ValidationError: a required section is missing or a value has the
            wrong type.
    """
    try:
        location = Location.from_dict(payload["location"])
        spec = SystemSpecification.from_dict(payload["system"])
        weather = weather_from_records(payload["weather"])
    except KeyError as exc:
        raise ValidationError(f"Missing required field: {exc.args[0]}", str(exc.args[0])) from exc
    except (TypeError, ValueError) as exc:
        raise ValidationError(str(exc)) from exc
    financial_options = dict(payload.get("financial_options") or {})
    return SimulationInput(
        location=location,
        spec=spec,
        weather=weather,
        include_financial=bool(payload.get("include_financial", bool(financial_options))),
        financial_options=financial_options,
    )


def _simulation_summary(label: str, result: ProductionResult) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "label": label,
        "annual_production_kwh": result.annual_production,
        "capacity_factor_pct": result.capacity_factor,
        "specific_yield": result.specific_yield,
        "performance_ratio": result.performance_ratio,
    }
    if result.financial_analysis is not None:
        summary["payback_years"] = result.financial_analysis.payback_period
        summary["npv"] = result.financial_analysis.npv
    return summary


def _design_summary(label: str, design: DesignResult) -> Dict[str, Any]:
    return {
        "label": label,
        "design_id": design.design_id,
        "description": design.best.describe(),
        "dc_capacity_kw": design.system_specs.dc_capacity_kw,
        "annual_production_kwh": design.performance.annual_production,
        "offset_pct": design.energy_analysis.offset_percentage,
        "net_cost": design.economics.net_cost,
        "score": design.score.overall,
        "variants_evaluated": design.variants_evaluated,
    }


class DesignApplication:
    """
    High-level orchestrator used by the CLI and the FastAPI surface.

    Parses payloads, runs the engine, exports artifacts and records every
    successful run in the database.
    """

    def __init__(
        self,
        *,
        persistence: PersistenceService | None = None,
        result_builder: ResultBuilder | None = None,
        save_outputs: bool = True,
    ) -> None:
        """
        Args:
            persistence: Optional PersistenceService for the catalog and the
                run history.
            result_builder: Optional ResultBuilder for CSV/chart exports.
            save_outputs: When False, the result builder is never invoked.
        """
        self.persistence = persistence
        self.result_builder = result_builder
        self.save_outputs = save_outputs
        self.simulator = ProductionSimulator()

    def catalog(self) -> EquipmentCatalog:
        """Stored equipment, or the built-in catalog when nothing is stored."""
        if self.persistence is None:
            return default_catalog()
        catalog = self.persistence.load_catalog()
        if not (catalog.panels or catalog.inverters or catalog.batteries):
            logger.info("Equipment database is empty, using the built-in catalog")
            return default_catalog()
        return catalog

    def run_simulation(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Simulate one system.

        Returns:
            The ProductionResult as a dict plus ``label`` and ``output_dir``.
        """
        label = str(payload.get("label") or "simulation")
        inputs = parse_simulation_payload(payload)
        options = FinancialOptions.from_dict(inputs.financial_options) if inputs.financial_options else None
        result = self.simulator.simulate(
            inputs.location,
            inputs.spec,
            inputs.weather,
            options,
            include_financial=inputs.include_financial,
        )
        logger.info("Simulation %s: %.0f kWh/yr", label, result.annual_production)

        output_dir = None
        if self.save_outputs and self.result_builder:
            output_dir = self.result_builder.build_simulation_outputs(result, label)

        if self.persistence:
            self.persistence.record_design_run(
                "simulation",
                label,
                request=dict(payload),
                summary=_simulation_summary(label, result),
                output_dir=str(output_dir) if output_dir else None,
            )

        data = result.to_dict()
        data["label"] = label
        data["output_dir"] = str(output_dir) if output_dir else None
        return data

    def run_design(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Design a system for the customer requirements in ``payload``.

        The payload holds the requirement fields (``location``,
        ``monthly_usage``, ``budget``, ``preferences``, ``utility_rates``)
        next to ``weather`` and an optional ``label``.

        Raises:
            ValidationError: malformed requirements or weather.
            InfeasibleDesignError: no equipment matched any combination.
        """
        label = str(payload.get("label") or "design")
        requirements = requirements_from_dict(payload)
        try:
            weather = weather_from_records(payload["weather"])
        except KeyError as exc:
            raise ValidationError("Missing required field: weather", "weather") from exc
        except (TypeError, ValueError) as exc:
            raise ValidationError(str(exc), "weather") from exc

        designer = SystemDesigner(catalog=self.catalog(), simulator=self.simulator)
        design = designer.design(requirements, weather)

        output_dir = None
        if self.save_outputs and self.result_builder:
            output_dir = self.result_builder.build_design_outputs(design, label)

        if self.persistence:
            self.persistence.record_design_run(
                "design",
                label,
                request=dict(payload),
                summary=_design_summary(label, design),
                output_dir=str(output_dir) if output_dir else None,
            )

        data = design.to_dict()
        data["label"] = label
        data["output_dir"] = str(output_dir) if output_dir else None
        return data
