import logging
import uuid
from typing import Optional

from backend.domain.models import Asset, AssetStatus, Project
from backend.domain.services.access import load_owned_asset, load_owned_project
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)

logger = logging.getLogger(__name__)


class AssetService:
    """
    Registration and removal of projects and videos.

    File upload and storage happen elsewhere; a video is registered here with
    the path its file was stored at, in PENDING state with no progress.
    """

    def __init__(self, store: InMemoryAssetRepository, projects: InMemoryProjectRepository) -> None:
        self._store = store
        self._projects = projects

    def create_project(self, name: str, owner_id: str) -> Project:
        project = Project(id=str(uuid.uuid4()), name=name, owner_id=owner_id)
        self._projects.save(project)
        return project

    def register_asset(
        self,
        project_id: str,
        requester_id: str,
        *,
        title: str,
        source_path: Optional[str],
        description: str = "",
    ) -> Asset:
        load_owned_project(self._projects, project_id, requester_id)
        asset = Asset(
            id=str(uuid.uuid4()),
            project_id=project_id,
            title=title,
            description=description,
            source_path=source_path,
        )
        self._store.add(asset)
        logger.info("Registered video %s in project %s", asset.id, project_id)
        return asset

    def delete_asset(self, asset_id: str, requester_id: str) -> Asset:
        """Videos with a job in flight cannot be deleted."""
        load_owned_asset(self._store, self._projects, asset_id, requester_id)
        asset = self._store.delete(
            asset_id,
            expected=(AssetStatus.PENDING, AssetStatus.COMPLETED, AssetStatus.FAILED),
        )
        logger.info("Deleted video %s", asset_id)
        return asset
