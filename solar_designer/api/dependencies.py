from __future__ import annotations

from functools import lru_cache

from ..application import DesignApplication
from ..db.session import init_db
from ..persistence import PersistenceService


@lru_cache()
def get_persistence_service() -> PersistenceService:
    """
    Provide a cached PersistenceService instance for API routes.
    """
    init_db()
    return PersistenceService()


def get_application_service() -> DesignApplication:
    """
    Provide a DesignApplication configured for API usage.
    """
    persistence = get_persistence_service()
    # API responses carry all data; no files are written
    return DesignApplication(
        persistence=persistence,
        result_builder=None,
        save_outputs=False,
    )
