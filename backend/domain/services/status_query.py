from dataclasses import dataclass
from typing import List, Optional

from backend.domain.models import Asset, AssetStatus
from backend.domain.services.access import load_owned_asset, load_owned_project
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)


@dataclass(frozen=True)
class StatusSnapshot:
    id: str
    status: AssetStatus
    processing_progress: int
    error_message: Optional[str]


class StatusQuery:
    """Read-only lookups used by polling clients. Nothing here writes."""

    def __init__(self, store: InMemoryAssetRepository, projects: InMemoryProjectRepository) -> None:
        self._store = store
        self._projects = projects

    def get_status(self, asset_id: str, requester_id: str) -> StatusSnapshot:
        asset = load_owned_asset(self._store, self._projects, asset_id, requester_id)
        return StatusSnapshot(
            id=asset.id,
            status=asset.status,
            processing_progress=asset.processing_progress,
            error_message=asset.error_message,
        )

    def get_asset(self, asset_id: str, requester_id: str) -> Asset:
        return load_owned_asset(self._store, self._projects, asset_id, requester_id)

    def list_project_assets(self, project_id: str, requester_id: str) -> List[Asset]:
        load_owned_project(self._projects, project_id, requester_id)
        return self._store.list_by_project(project_id)
