from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import InfeasibleDesignError, ValidationError
from ..logging_setup import RequestLoggingMiddleware
from .routes import catalog_router, simulation_router


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content=exc.to_dict())


async def _infeasible_design_handler(request: Request, exc: InfeasibleDesignError) -> JSONResponse:
    return JSONResponse(status_code=409, content=exc.to_dict())


def create_app() -> FastAPI:
    """
    Instantiate the FastAPI application and register routers.

    Routers:
    - catalog: equipment catalog management (panels, inverters, batteries)
    - simulation: production simulation, system design, run history

    Engine errors become JSON responses: ``ValidationError`` -> 422,
    ``InfeasibleDesignError`` -> 409.

    Example:
        ```python
        app = create_app()
        uvicorn.run(app, host="0.0.0.0", port=8000)
        ```
    """
    app = FastAPI(
        title="Solar Designer API",
        version="0.1.0",
        description="Production simulation and system design for residential PV.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(InfeasibleDesignError, _infeasible_design_handler)

    app.include_router(catalog_router)
    app.include_router(simulation_router)

    return app


app = create_app()
