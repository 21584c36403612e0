"""
Database persistence layer for the equipment catalog and run history.

Provides upserts and listings for panels, inverters and batteries, a loader
that turns the stored rows into an :class:`InMemoryEquipmentCatalog`
snapshot for the optimizer, and storage of simulation/design run summaries.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.orm import Session

from .db.models import BatteryModel, DesignRunRecord, InverterModel, PanelModel
from .db.session import SessionLocal
from .design.catalog import (
    DEFAULT_BATTERIES,
    DEFAULT_INVERTERS,
    DEFAULT_PANELS,
    BatteryOption,
    InMemoryEquipmentCatalog,
    InverterOption,
    PanelOption,
)

logger = logging.getLogger(__name__)

_EQUIPMENT_MODELS = {
    "panels": PanelModel,
    "inverters": InverterModel,
    "batteries": BatteryModel,
}


def _asdict_safe(obj: Any) -> Dict[str, Any]:
    """
    Convert dataclasses, pydantic models or mappings to a plain dict.

    Returns an empty dict for ``None``.

    Raises:
        TypeError: If the object type is not supported.
    """
    if obj is None:
        return {}
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    raise TypeError(f"Unsupported object type for serialization: {type(obj)!r}")


class PersistenceService:
    """
    Database persistence service for the equipment catalog and run history.

    Every public method runs in its own transactional session: commit on
    success, rollback on error. Equipment upserts are keyed on the option's
    catalog id.

    Attributes:
        _session_factory: SQLAlchemy session factory.

    Example:
        ```python
        from solar_designer.persistence import PersistenceService

        service = PersistenceService()
        service.seed_default_catalog()
        catalog = service.load_catalog()
        print(len(catalog.panels), "panels available")
        ```
    """

    def __init__(self, session_factory: type[Session] | None = None) -> None:
        """
        Args:
            session_factory: SQLAlchemy session factory. Defaults to
                ``SessionLocal``; tests pass an in-memory SQLite factory.
        """
        self._session_factory = session_factory or SessionLocal

    @contextmanager
    def session(self) -> Iterable[Session]:
        """
        Transactional session: commits on success, rolls back on exception
        and always closes.
        """
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def upsert_panel(self, panel_data: Any) -> PanelModel | None:
        """
        Insert or update a panel.

        Args:
            panel_data: PanelOption or mapping with PanelOption fields.

        Returns:
            Stored PanelModel or None when no data is given.
        """
        if panel_data is None:
            return None
        option = PanelOption.from_dict(_asdict_safe(panel_data))
        payload = option.to_dict()
        with self.session() as session:
            stmt = select(PanelModel).where(PanelModel.catalog_id == option.id)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = PanelModel(catalog_id=option.id)
                session.add(record)
            record.manufacturer = option.manufacturer
            record.model = option.model
            record.panel_type = option.panel_type.value
            record.wattage = option.wattage
            record.efficiency = option.efficiency
            record.tier = option.tier
            record.availability = option.availability.value
            record.specs = payload
            session.flush()
            session.refresh(record)
            logger.info("Stored panel %s", option.id)
            return record

    def upsert_inverter(self, inverter_data: Any) -> InverterModel | None:
        """Insert or update an inverter (InverterOption or mapping)."""
        if inverter_data is None:
            return None
        option = InverterOption.from_dict(_asdict_safe(inverter_data))
        payload = option.to_dict()
        with self.session() as session:
            stmt = select(InverterModel).where(InverterModel.catalog_id == option.id)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = InverterModel(catalog_id=option.id)
                session.add(record)
            record.manufacturer = option.manufacturer
            record.model = option.model
            record.inverter_type = option.inverter_type.value
            record.capacity_w = option.capacity_w
            record.cec_efficiency = option.cec_efficiency
            record.availability = option.availability.value
            record.specs = payload
            session.flush()
            session.refresh(record)
            logger.info("Stored inverter %s", option.id)
            return record

    def upsert_battery(self, battery_data: Any) -> BatteryModel | None:
        """Insert or update a battery (BatteryOption or mapping)."""
        if battery_data is None:
            return None
        option = BatteryOption.from_dict(_asdict_safe(battery_data))
        payload = option.to_dict()
        with self.session() as session:
            stmt = select(BatteryModel).where(BatteryModel.catalog_id == option.id)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = BatteryModel(catalog_id=option.id)
                session.add(record)
            record.manufacturer = option.manufacturer
            record.model = option.model
            record.technology = option.technology
            record.capacity_kwh = option.capacity_kwh
            record.availability = option.availability.value
            record.specs = payload
            session.flush()
            session.refresh(record)
            logger.info("Stored battery %s", option.id)
            return record

    def list_panels(self) -> list[PanelModel]:
        """List all panels ordered by catalog id."""
        with self.session() as session:
            stmt = select(PanelModel).order_by(PanelModel.catalog_id)
            return list(session.execute(stmt).scalars().all())

    def list_inverters(self) -> list[InverterModel]:
        """List all inverters ordered by catalog id."""
        with self.session() as session:
            stmt = select(InverterModel).order_by(InverterModel.catalog_id)
            return list(session.execute(stmt).scalars().all())

    def list_batteries(self) -> list[BatteryModel]:
        """List all batteries ordered by catalog id."""
        with self.session() as session:
            stmt = select(BatteryModel).order_by(BatteryModel.catalog_id)
            return list(session.execute(stmt).scalars().all())

    def delete_equipment(self, kind: str, catalog_id: str) -> bool:
        """
        Remove one equipment row.

        Args:
            kind: ``"panels"``, ``"inverters"`` or ``"batteries"``.
            catalog_id: Catalog id of the row.

        Returns:
            True when a row was deleted.

        Raises:
            KeyError: unknown equipment kind.
        """
        model = _EQUIPMENT_MODELS[kind]
        with self.session() as session:
            result = session.execute(delete(model).where(model.catalog_id == catalog_id))
            return result.rowcount > 0

    def count_equipment(self) -> Dict[str, int]:
        with self.session() as session:
            return {
                kind: session.execute(select(func.count()).select_from(model)).scalar_one()
                for kind, model in _EQUIPMENT_MODELS.items()
            }

    def seed_default_catalog(self) -> Dict[str, int]:
        """Upsert the built-in equipment; returns the number of rows per kind."""
        for panel in DEFAULT_PANELS:
            self.upsert_panel(panel)
        for inverter in DEFAULT_INVERTERS:
            self.upsert_inverter(inverter)
        for battery in DEFAULT_BATTERIES:
            self.upsert_battery(battery)
        return self.count_equipment()

    def load_catalog(self) -> InMemoryEquipmentCatalog:
        """
        Snapshot of the stored equipment for one design call.

        The snapshot is immutable, so later catalog edits never affect a
        design that is already running.
        """
        return InMemoryEquipmentCatalog.from_iterables(
            panels=[PanelOption.from_dict(row.specs) for row in self.list_panels()],
            inverters=[InverterOption.from_dict(row.specs) for row in self.list_inverters()],
            batteries=[BatteryOption.from_dict(row.specs) for row in self.list_batteries()],
        )

    def record_design_run(
        self,
        run_type: str,
        label: str,
        request: Mapping[str, Any],
        summary: Mapping[str, Any],
        *,
        output_dir: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> DesignRunRecord:
        """
        Store the outcome of a simulation or design run.

        Args:
            run_type: ``"simulation"`` or ``"design"``.
            label: Descriptive name.
            request: JSON-serializable input payload.
            summary: JSON-serializable metrics.
            output_dir: Filesystem path containing exported artifacts.
            notes: Free text.
        """
        with self.session() as session:
            record = DesignRunRecord(
                run_type=run_type,
                label=label,
                request=dict(request),
                summary=dict(summary),
                output_dir=output_dir,
                notes=notes,
            )
            session.add(record)
            session.flush()
            session.refresh(record)
            return record

    def list_design_runs(self, limit: int = 50, run_type: Optional[str] = None) -> list[DesignRunRecord]:
        """
        Latest runs, newest first.

        Args:
            limit: Maximum number of records to return.
            run_type: Optional filter on the run type.
        """
        with self.session() as session:
            stmt = select(DesignRunRecord)
            if run_type is not None:
                stmt = stmt.where(DesignRunRecord.run_type == run_type)
            stmt = stmt.order_by(desc(DesignRunRecord.created_at), desc(DesignRunRecord.id)).limit(limit)
            return list(session.execute(stmt).scalars().all())
