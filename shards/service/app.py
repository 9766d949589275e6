"""FastAPI application entrypoint for shards service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ShardsConfig, load_config
from ..errors import AlreadyBuiltError, ConfigError, ShardsError
from ..orchestrator import Orchestrator


class BuildRequest(BaseModel):
    path: str
    entrypoints: Optional[List[str]] = None
    strip_excludes: Optional[List[str]] = None
    sharing_threshold: Optional[int] = None
    dest_dir: Optional[str] = None
    dep_report: Optional[str] = None


class BuildResponse(BaseModel):
    status: str
    entries: Dict[str, str]
    shared: str
    common: List[str]
    exclusions: List[str]
    report: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


OrchestratorFactory = Callable[[ShardsConfig], Orchestrator]


def _default_orchestrator(config: ShardsConfig) -> Orchestrator:
    return Orchestrator(config)


def create_app(
    orchestrator_factory: OrchestratorFactory = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing shards builds."""

    app = FastAPI(title="Shards Service", version="1.0.0")

    async def get_factory() -> OrchestratorFactory:
        return orchestrator_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=BuildResponse)
    async def build(
        payload: BuildRequest,
        factory: OrchestratorFactory = Depends(get_factory),
    ) -> BuildResponse:
        config = load_config(Path(payload.path)).with_overrides(
            entrypoints=payload.entrypoints,
            strip_excludes=payload.strip_excludes,
            sharing_threshold=payload.sharing_threshold,
            dest_dir=payload.dest_dir,
            dep_report=payload.dep_report,
        )
        # A fresh orchestrator per request; each instance builds only once.
        result = await factory(config).build()
        return BuildResponse(
            status="ok",
            entries={entry: str(path) for entry, path in result.entries.items()},
            shared=str(result.shared),
            common=result.common,
            exclusions=result.exclusions,
            report=str(result.report) if result.report is not None else None,
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AlreadyBuiltError)
    async def already_built_handler(
        _: Any, exc: AlreadyBuiltError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ShardsError)
    async def build_error_handler(_: Any, exc: ShardsError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
