"""
API route modules, grouped by domain:

- catalog: equipment CRUD (panels, inverters, batteries) and seeding
- simulation: production simulation, system design and run history

All routers are mounted under /api.
"""

from __future__ import annotations

from .catalog import router as catalog_router
from .simulation import router as simulation_router

__all__ = ["catalog_router", "simulation_router"]
