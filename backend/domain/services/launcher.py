import logging
import uuid
from datetime import datetime, timedelta
from functools import partial
from typing import List, Optional

from backend.config import INITIAL_PROGRESS
from backend.domain.errors import ProcessingConflictError
from backend.domain.models import Asset, AssetStatus, utcnow
from backend.domain.services.access import load_owned_asset
from backend.domain.services.job_runner import JobRunner
from backend.infrastructure.dispatcher import JobDispatcher
from backend.infrastructure.persistence.in_memory_repo import (
    InMemoryAssetRepository,
    InMemoryProjectRepository,
)

logger = logging.getLogger(__name__)

# Any status except PROCESSING may be (re)opened by a new request.
_STARTABLE = (AssetStatus.PENDING, AssetStatus.COMPLETED, AssetStatus.FAILED)
_PROCESSING = (AssetStatus.PROCESSING,)

CANCELLED_MESSAGE = "Processing cancelled"
STALLED_MESSAGE = "Processing stalled"


class ProcessingLauncher:
    """
    Starts, cancels and reconciles processing jobs.

    The status check and the switch to PROCESSING happen in one store update,
    so of two concurrent requests for the same asset only one can win; the
    other gets ProcessingConflictError and no job is dispatched for it.
    """

    def __init__(
        self,
        store: InMemoryAssetRepository,
        projects: InMemoryProjectRepository,
        dispatcher: JobDispatcher,
        runner: JobRunner,
        stall_timeout: float = 0.0,
    ) -> None:
        self._store = store
        self._projects = projects
        self._dispatcher = dispatcher
        self._runner = runner
        self._stall_timeout = stall_timeout

    def request_processing(self, asset_id: str, requester_id: str) -> Asset:
        load_owned_asset(self._store, self._projects, asset_id, requester_id)

        job_id = uuid.uuid4().hex
        try:
            asset = self._store.update_status(
                asset_id,
                {
                    "status": AssetStatus.PROCESSING,
                    "processing_progress": INITIAL_PROGRESS,
                    "error_message": None,
                    "artifacts": None,
                    "processed_at": None,
                    "job_id": job_id,
                },
                expected=_STARTABLE,
            )
        except ProcessingConflictError as e:
            raise ProcessingConflictError(asset_id, e.status, "start processing") from e

        try:
            self._dispatcher.submit(asset_id, job_id, partial(self._runner.run, asset_id, job_id))
        except RuntimeError as e:
            # Worker pool is shut down; release the claim.
            logger.error("Could not dispatch job for video %s: %s", asset_id, e)
            self._store.update_status(
                asset_id,
                {"status": AssetStatus.FAILED, "error_message": f"Could not start processing: {e}"},
                expected=_PROCESSING,
                expected_job_id=job_id,
            )
            raise

        logger.info("AI processing requested for video %s by %s (job %s)", asset_id, requester_id, job_id)
        return asset

    def cancel_processing(self, asset_id: str, requester_id: str) -> Asset:
        """
        Ask the running job to stop. The job records FAILED itself at its next
        checkpoint; if no job is running for the asset it is failed here.
        """
        asset = load_owned_asset(self._store, self._projects, asset_id, requester_id)
        if asset.status != AssetStatus.PROCESSING:
            raise ProcessingConflictError(asset_id, asset.status.value, "cancel")

        if self._dispatcher.cancel(asset_id, asset.job_id):
            logger.info("Cancellation requested for video %s", asset_id)
            return asset

        try:
            return self._store.update_status(
                asset_id,
                {"status": AssetStatus.FAILED, "error_message": CANCELLED_MESSAGE, "artifacts": None},
                expected=_PROCESSING,
                expected_job_id=asset.job_id,
            )
        except ProcessingConflictError as e:
            raise ProcessingConflictError(asset_id, e.status, "cancel") from e

    def reconcile_stalled(self, now: Optional[datetime] = None) -> List[str]:
        """
        Fail every PROCESSING asset that has not been written to within the
        stall timeout. Returns the ids of the assets that were failed.
        """
        if not self._stall_timeout:
            return []
        now = now or utcnow()
        cutoff = now - timedelta(seconds=self._stall_timeout)

        failed: List[str] = []
        for asset in self._store.list_by_status(AssetStatus.PROCESSING):
            if asset.updated_at > cutoff:
                continue
            try:
                self._store.update_status(
                    asset.id,
                    {"status": AssetStatus.FAILED, "error_message": STALLED_MESSAGE, "artifacts": None},
                    expected=_PROCESSING,
                    expected_job_id=asset.job_id,
                )
            except ProcessingConflictError:
                continue
            # Scoped to the stalled job; a newer job for the same video is left alone.
            self._dispatcher.cancel(asset.id, asset.job_id)
            logger.warning(
                "Video %s stalled at %d%% since %s; marked as failed",
                asset.id,
                asset.processing_progress,
                asset.updated_at.isoformat(),
            )
            failed.append(asset.id)
        return failed
