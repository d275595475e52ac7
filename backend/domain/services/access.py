from backend.domain.errors import AccessDeniedError, AssetNotFoundError, ProjectNotFoundError
from backend.domain.models import Asset, Project
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)


def load_owned_project(
    projects: InMemoryProjectRepository, project_id: str, requester_id: str
) -> Project:
    """Projects owned by someone else are reported as missing."""
    project = projects.get(project_id)
    if project is None or project.owner_id != requester_id:
        raise ProjectNotFoundError(project_id)
    return project


def load_owned_asset(
    store: InMemoryAssetRepository,
    projects: InMemoryProjectRepository,
    asset_id: str,
    requester_id: str,
) -> Asset:
    """
    Return the asset if ``requester_id`` owns its project.

    Raises AssetNotFoundError when the asset does not exist and
    AccessDeniedError when it belongs to someone else.
    """
    asset = store.read(asset_id)
    if asset is None:
        raise AssetNotFoundError(asset_id)
    project = projects.get(asset.project_id)
    if project is None or project.owner_id != requester_id:
        raise AccessDeniedError(asset_id, requester_id)
    return asset
