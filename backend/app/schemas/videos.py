from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from backend.domain.models import Asset, AssetStatus


class VideoStatus(BaseModel):
    id: str
    status: AssetStatus
    processing_progress: int
    error_message: Optional[str] = None


class ProcessingAccepted(BaseModel):
    asset_id: str
    status: AssetStatus


class VideoCreateRequest(BaseModel):
    project_id: str
    title: str
    description: str = ""
    source_path: Optional[str] = None


class VideoDetail(BaseModel):
    id: str
    project_id: str
    title: str
    description: str = ""
    status: AssetStatus
    processing_progress: int
    error_message: Optional[str] = None
    transcript: Any = None
    ai_script: Any = None
    captions: Any = None
    cuts: Any = None
    voiceover: Any = None
    zoom_points: Any = None
    created_at: datetime
    processed_at: Optional[datetime] = None

    @classmethod
    def from_asset(cls, asset: Asset) -> "VideoDetail":
        artifacts = asset.artifacts
        return cls(
            id=asset.id,
            project_id=asset.project_id,
            title=asset.title,
            description=asset.description,
            status=asset.status,
            processing_progress=asset.processing_progress,
            error_message=asset.error_message,
            transcript=artifacts.transcript if artifacts else None,
            ai_script=artifacts.ai_script if artifacts else None,
            captions=artifacts.captions if artifacts else None,
            cuts=artifacts.cuts if artifacts else None,
            voiceover=artifacts.voiceover if artifacts else None,
            zoom_points=artifacts.zoom_points if artifacts else None,
            created_at=asset.created_at,
            processed_at=asset.processed_at,
        )


class VideoList(BaseModel):
    videos: List[VideoDetail] = []
    count: int = 0
