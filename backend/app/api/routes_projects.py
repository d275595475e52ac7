from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.errors import to_http_exception
from backend.app.dependencies import Pipeline, get_pipeline, get_requester_id
from backend.app.schemas.projects import ProjectCreateRequest, ProjectOut
from backend.app.schemas.videos import VideoDetail, VideoList
from backend.domain.errors import AssetError

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.post("", response_model=ProjectOut, status_code=201)
async def create_project(
    body: ProjectCreateRequest,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Project name is required")
    project = pipeline.assets.create_project(name, requester_id)
    return ProjectOut(id=project.id, name=project.name, created_at=project.created_at)


@router.get("/{project_id}/videos", response_model=VideoList)
async def list_project_videos(
    project_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    try:
        assets = pipeline.query.list_project_assets(project_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return VideoList(videos=[VideoDetail.from_asset(a) for a in assets], count=len(assets))
