"""
Simulation and design API endpoints.

- POST /simulate: monthly production (and optional economics) of one system
- POST /design: best design plus ranked alternatives for a customer
- GET /design-runs: history of both run types

Engine errors are mapped to HTTP responses by the handlers registered in
``app.create_app``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...application import DesignApplication
from ...persistence import PersistenceService
from .. import dependencies
from ..schemas import simulation as sim_schemas

router = APIRouter(prefix="/api", tags=["simulation"])


@router.post("/simulate", response_model=sim_schemas.SimulationResponse)
def simulate(
    payload: sim_schemas.SimulationRequest,
    app_service: DesignApplication = Depends(dependencies.get_application_service),
) -> sim_schemas.SimulationResponse:
    """
    Simulate the monthly production of one PV system.

    The financial block is returned when ``include_financial`` is true or
    ``financial_options`` are given.
    """
    result = app_service.run_simulation(payload.model_dump(mode="json", exclude_none=True))
    return sim_schemas.SimulationResponse(**result)


@router.post("/design", response_model=sim_schemas.DesignResponse)
def design(
    payload: sim_schemas.DesignRequest,
    app_service: DesignApplication = Depends(dependencies.get_application_service),
) -> sim_schemas.DesignResponse:
    """
    Design the best system for the customer's usage, budget and preferences.

    Returns 409 when no equipment combination yields a design.
    """
    result = app_service.run_design(payload.model_dump(mode="json", exclude_none=True))
    return sim_schemas.DesignResponse(**result)


@router.get("/design-runs", response_model=list[sim_schemas.DesignRunResponse])
def list_design_runs(
    limit: int = Query(50, ge=1, le=500),
    run_type: Optional[str] = Query(None, pattern="^(simulation|design)$"),
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[sim_schemas.DesignRunResponse]:
    """Latest simulation and design runs, newest first."""
    return persistence.list_design_runs(limit=limit, run_type=run_type)
