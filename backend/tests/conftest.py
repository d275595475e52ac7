import pytest

from backend.config import PipelineSettings
from backend.domain.models import Asset, Project
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)
from backend.tests.fakes import OWNER, CountingDispatcher


@pytest.fixture
def fast_settings():
    return PipelineSettings(milestone_interval=0.0, max_workers=4, stall_timeout=0.0)


@pytest.fixture
def store():
    return InMemoryAssetRepository()


@pytest.fixture
def projects():
    repo = InMemoryProjectRepository()
    repo.save(Project(id="project-1", name="Demo", owner_id=OWNER))
    return repo


@pytest.fixture
def make_asset(store):
    def _make(asset_id="video-1", **overrides):
        fields = {
            "id": asset_id,
            "project_id": "project-1",
            "title": "Launch teaser",
            "source_path": f"/uploads/{asset_id}.mp4",
        }
        fields.update(overrides)
        asset = Asset(**fields)
        store.add(asset)
        return asset

    return _make


@pytest.fixture
def dispatcher():
    d = CountingDispatcher()
    yield d
    d.shutdown(wait=True)
