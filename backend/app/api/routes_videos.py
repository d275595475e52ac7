from fastapi import APIRouter, Depends, Response

from backend.app.api.errors import to_http_exception
from backend.app.dependencies import Pipeline, get_pipeline, get_requester_id
from backend.app.schemas.videos import (
    ProcessingAccepted,
    VideoCreateRequest,
    VideoDetail,
    VideoStatus,
)
from backend.domain.errors import AssetError

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.post("", response_model=VideoDetail, status_code=201)
async def register_video(
    body: VideoCreateRequest,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    """
    Register a video whose file has already been stored by the upload service.
    The video starts in PENDING with no progress.
    """
    try:
        asset = pipeline.assets.register_asset(
            body.project_id,
            requester_id,
            title=body.title,
            description=body.description,
            source_path=body.source_path,
        )
    except AssetError as e:
        raise to_http_exception(e) from e
    return VideoDetail.from_asset(asset)


@router.get("/{video_id}", response_model=VideoDetail)
async def get_video(
    video_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    try:
        asset = pipeline.query.get_asset(video_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return VideoDetail.from_asset(asset)


@router.post("/{video_id}/process", response_model=ProcessingAccepted, status_code=202)
async def process_video(
    video_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    """
    Start AI processing in the background and return right away.
    Poll GET /api/videos/{video_id}/status to follow progress.
    """
    try:
        asset = pipeline.launcher.request_processing(video_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return ProcessingAccepted(asset_id=asset.id, status=asset.status)


@router.get("/{video_id}/status", response_model=VideoStatus)
async def get_video_status(
    video_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    try:
        snapshot = pipeline.query.get_status(video_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return VideoStatus(
        id=snapshot.id,
        status=snapshot.status,
        processing_progress=snapshot.processing_progress,
        error_message=snapshot.error_message,
    )


@router.post("/{video_id}/cancel", response_model=VideoStatus, status_code=202)
async def cancel_video_processing(
    video_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    try:
        asset = pipeline.launcher.cancel_processing(video_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return VideoStatus(
        id=asset.id,
        status=asset.status,
        processing_progress=asset.processing_progress,
        error_message=asset.error_message,
    )


@router.delete("/{video_id}", status_code=204)
async def delete_video(
    video_id: str,
    pipeline: Pipeline = Depends(get_pipeline),
    requester_id: str = Depends(get_requester_id),
):
    try:
        pipeline.assets.delete_asset(video_id, requester_id)
    except AssetError as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)
