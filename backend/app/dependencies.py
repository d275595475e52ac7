from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, Request

from backend.config import PipelineSettings
from backend.domain.services.assets import AssetService
from backend.domain.services.job_runner import JobRunner
from backend.domain.services.launcher import ProcessingLauncher
from backend.domain.services.status_query import StatusQuery
from backend.infrastructure.ai_adapter import AICollaborator, MockAICollaborator
from backend.infrastructure.dispatcher import JobDispatcher
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)


@dataclass
class Pipeline:
    """Everything one app instance needs, wired once at startup."""

    settings: PipelineSettings
    store: InMemoryAssetRepository
    projects: InMemoryProjectRepository
    dispatcher: JobDispatcher
    launcher: ProcessingLauncher
    query: StatusQuery
    assets: AssetService


def build_pipeline(
    settings: PipelineSettings,
    collaborator: Optional[AICollaborator] = None,
) -> Pipeline:
    store = InMemoryAssetRepository()
    projects = InMemoryProjectRepository()
    dispatcher = JobDispatcher(max_workers=settings.max_workers)
    runner = JobRunner(
        store,
        collaborator or MockAICollaborator(),
        milestones=settings.milestones,
        milestone_interval=settings.milestone_interval,
    )
    return Pipeline(
        settings=settings,
        store=store,
        projects=projects,
        dispatcher=dispatcher,
        launcher=ProcessingLauncher(
            store, projects, dispatcher, runner, stall_timeout=settings.stall_timeout
        ),
        query=StatusQuery(store, projects),
        assets=AssetService(store, projects),
    )


def get_pipeline(request: Request) -> Pipeline:
    return request.app.state.pipeline


def get_requester_id(authorization: Optional[str] = Header(None)) -> str:
    """
    Resolve the caller's identity from ``Authorization: Bearer <user-id>``.
    Token verification is done upstream (gateway / auth service).
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Access token required")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Access token required")
    return token
