from threading import Event

from backend.domain.errors import CollaboratorError
from backend.domain.models import Artifacts, Asset, AssetStatus
from backend.infrastructure.ai_adapter import MockAICollaborator
from backend.infrastructure.dispatcher import JobDispatcher

OWNER = "user-owner"
OTHER = "user-other"


class FailingCollaborator:
    def __init__(self, reason: str = "AI service unavailable"):
        self.reason = reason
        self.calls = 0

    def process(self, asset):
        self.calls += 1
        raise CollaboratorError(self.reason)


class GatedCollaborator:
    """Blocks inside process() until the test opens the gate."""

    def __init__(self):
        self.gate = Event()
        self.entered = Event()
        self.calls = 0

    def process(self, asset):
        self.calls += 1
        self.entered.set()
        self.gate.wait(timeout=5)
        return MockAICollaborator().process(asset)


class CountingDispatcher(JobDispatcher):
    def __init__(self, max_workers: int = 4):
        super().__init__(max_workers=max_workers)
        self.submitted = []

    def submit(self, asset_id, job_id, job):
        self.submitted.append(asset_id)
        return super().submit(asset_id, job_id, job)


def assert_status_invariants(asset: Asset) -> None:
    if asset.status == AssetStatus.COMPLETED:
        assert asset.processing_progress == 100
        assert isinstance(asset.artifacts, Artifacts)
        assert asset.error_message is None
        assert asset.processed_at is not None
    elif asset.status == AssetStatus.FAILED:
        assert asset.error_message
        assert asset.artifacts is None
