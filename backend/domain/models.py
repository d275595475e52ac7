from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Artifacts:
    """
    Output bundle of the AI collaborator.

    Every field is an opaque payload owned by the collaborator; it is stored
    and returned exactly as produced.
    """
    transcript: Any
    ai_script: Any
    captions: Any
    cuts: Any
    voiceover: Any
    zoom_points: Any


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    owner_id: str
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class Asset:
    id: str
    project_id: str
    title: str
    source_path: Optional[str]
    description: str = ""
    status: AssetStatus = AssetStatus.PENDING
    processing_progress: int = 0
    error_message: Optional[str] = None
    job_id: Optional[str] = None  # id of the job that last opened Processing
    artifacts: Optional[Artifacts] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    processed_at: Optional[datetime] = None
