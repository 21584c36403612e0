"""
Equipment catalog API endpoints.

Panels, inverters and batteries support upsert on their catalog id. Each
row keeps the complete option record in its ``specs`` JSON field, which is
what design requests read back.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from ...persistence import PersistenceService
from .. import dependencies
from ..schemas import equipment as eq_schemas

router = APIRouter(prefix="/api", tags=["catalog"])


class EquipmentKind(str, Enum):
    PANELS = "panels"
    INVERTERS = "inverters"
    BATTERIES = "batteries"


@router.get("/panels", response_model=list[eq_schemas.PanelResponse])
def list_panels(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[eq_schemas.PanelResponse]:
    """List all stored panels ordered by catalog id."""
    return persistence.list_panels()


@router.post("/panels", response_model=eq_schemas.PanelResponse)
def create_panel(
    payload: eq_schemas.PanelCreate,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> eq_schemas.PanelResponse:
    """
    Create or update a panel.

    Submitting the same ``id`` twice updates the existing row, so the call is
    idempotent.
    """
    return persistence.upsert_panel(payload.model_dump())


@router.get("/inverters", response_model=list[eq_schemas.InverterResponse])
def list_inverters(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[eq_schemas.InverterResponse]:
    return persistence.list_inverters()


@router.post("/inverters", response_model=eq_schemas.InverterResponse)
def create_inverter(
    payload: eq_schemas.InverterCreate,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> eq_schemas.InverterResponse:
    """Create or update an inverter (upsert on ``id``)."""
    return persistence.upsert_inverter(payload.model_dump())


@router.get("/batteries", response_model=list[eq_schemas.BatteryResponse])
def list_batteries(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[eq_schemas.BatteryResponse]:
    return persistence.list_batteries()


@router.post("/batteries", response_model=eq_schemas.BatteryResponse)
def create_battery(
    payload: eq_schemas.BatteryCreate,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> eq_schemas.BatteryResponse:
    """Create or update a storage unit (upsert on ``id``)."""
    return persistence.upsert_battery(payload.model_dump())


@router.delete("/{kind}/{catalog_id}", status_code=204)
def delete_equipment(
    kind: EquipmentKind,
    catalog_id: str,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> None:
    """
    Remove one equipment row.

    Raises:
        HTTPException: 404 when no row has this catalog id.
    """
    if not persistence.delete_equipment(kind.value, catalog_id):
        raise HTTPException(status_code=404, detail=f"{kind.value[:-1]} '{catalog_id}' not found")


@router.post("/catalog/seed", response_model=eq_schemas.SeedResponse)
def seed_catalog(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> eq_schemas.SeedResponse:
    """Upsert the built-in equipment and return the row count per kind."""
    return eq_schemas.SeedResponse(**persistence.seed_default_catalog())
