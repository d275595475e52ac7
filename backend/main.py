import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from backend.app.api import routes_projects, routes_videos
from backend.app.dependencies import Pipeline, build_pipeline
from backend.config import PipelineSettings
from backend.infrastructure.ai_adapter import AICollaborator

logger = logging.getLogger("uvicorn.access")
pipeline_logger = logging.getLogger("backend.pipeline")


class LogRequestsMiddleware(BaseHTTPMiddleware):
    """Log when a request is received, before the handler runs."""

    async def dispatch(self, request, call_next):
        method = request.method
        path = request.url.path
        logger.info("Request started: %s %s", method, path)
        response = await call_next(request)
        return response


async def _sweep_stalled_jobs(pipeline: Pipeline) -> None:
    interval = pipeline.settings.stall_sweep_interval
    while True:
        await asyncio.sleep(interval)
        try:
            failed = pipeline.launcher.reconcile_stalled()
        except Exception:  # noqa: BLE001 - keep the sweeper alive
            pipeline_logger.exception("Stalled job sweep failed")
            continue
        if failed:
            pipeline_logger.warning("Marked %d stalled video(s) as failed", len(failed))


@asynccontextmanager
async def lifespan(app: FastAPI):
    pipeline: Pipeline = app.state.pipeline
    sweeper = None
    if pipeline.settings.stall_timeout and pipeline.settings.stall_sweep_interval > 0:
        sweeper = asyncio.create_task(_sweep_stalled_jobs(pipeline))
    try:
        yield
    finally:
        if sweeper is not None:
            sweeper.cancel()
        # Running jobs see their cancellation signal and record FAILED.
        await asyncio.to_thread(pipeline.dispatcher.shutdown, True)


def create_app(
    settings: Optional[PipelineSettings] = None,
    collaborator: Optional[AICollaborator] = None,
) -> FastAPI:
    app = FastAPI(title="Video AI Pipeline API", version="0.1.0", lifespan=lifespan)
    app.state.pipeline = build_pipeline(settings or PipelineSettings.from_env(), collaborator)

    app.add_middleware(LogRequestsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_projects.router)
    app.include_router(routes_videos.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
