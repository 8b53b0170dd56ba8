"""FastAPI application factory for the GitHub Actions monitor."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routes.workflows import router as workflows_router
from .services.github import get_workflow_run_jobs
from .services.github_config import get_poll_interval, get_repository_coordinates
from .services.github_models import JobsList
from .services.live_list import JobsRefresher, LiveJobList, SingleValueModel

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start watching ``GITHUB_WATCH_RUN_ID`` when set; stop any poll loop on shutdown."""
    refresher: JobsRefresher = app.state.jobs_refresher
    run_id = os.getenv("GITHUB_WATCH_RUN_ID")
    if run_id:
        coordinates = get_repository_coordinates()
        await refresher.start_polling(f"{coordinates.run_url(run_id)}/jobs", get_poll_interval())
    try:
        yield
    finally:
        await refresher.stop_polling()


def create_app() -> FastAPI:
    allowed_origins_env = os.getenv("ALLOWED_ORIGINS")
    if not allowed_origins_env:
        raise RuntimeError("ALLOWED_ORIGINS environment variable is required")
    allowed_origins = [origin.strip() for origin in allowed_origins_env.split(",") if origin.strip()]

    _configure_logging()

    app = FastAPI(title="GitHub Actions Monitor", version="1.0.0", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    jobs_model: SingleValueModel[JobsList] = SingleValueModel()
    app.state.jobs_model = jobs_model
    app.state.job_list = LiveJobList(jobs_model)
    app.state.jobs_refresher = JobsRefresher(jobs_model, get_workflow_run_jobs)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(workflows_router, prefix="/api/workflows")
    return app
