import logging
from dataclasses import fields
from threading import Event
from typing import Sequence

from backend.domain.errors import (
    CollaboratorError,
    InvalidAssetError,
    ProcessingCancelledError,
    ProcessingConflictError,
)
from backend.domain.models import Artifacts, AssetStatus, utcnow
from backend.infrastructure.ai_adapter import AICollaborator
from backend.infrastructure.persistence.in_memory_repo import InMemoryAssetRepository

logger = logging.getLogger(__name__)

_PROCESSING = (AssetStatus.PROCESSING,)


class JobRunner:
    """
    Advances one asset from PROCESSING to COMPLETED or FAILED.

    The launcher has already written status=PROCESSING and the starting
    progress. The runner then:
    - Pauses before each milestone and persists its progress value
    - Calls the AI collaborator once all milestones are recorded
    - Writes the artifacts and COMPLETED as a single update

    Any error is recorded as FAILED with an error message and never raised.
    Progress already written is left as it is.
    """

    def __init__(
        self,
        store: InMemoryAssetRepository,
        collaborator: AICollaborator,
        milestones: Sequence[int],
        milestone_interval: float = 1.0,
    ) -> None:
        self._store = store
        self._collaborator = collaborator
        self._milestones = tuple(milestones)
        self._milestone_interval = milestone_interval

    def run(self, asset_id: str, job_id: str, cancel_event: Event) -> None:
        logger.info("Starting AI processing for video %s (job %s)", asset_id, job_id)
        try:
            self._run(asset_id, job_id, cancel_event)
        except Exception as exc:  # noqa: BLE001 - top-level guard
            self._fail(asset_id, job_id, exc)

    def _run(self, asset_id: str, job_id: str, cancel_event: Event) -> None:
        asset = self._store.read(asset_id)
        if asset is None:
            # Deleted between dispatch and start; nothing left to write to.
            logger.warning("Video %s disappeared before job %s started", asset_id, job_id)
            return
        if not asset.source_path:
            raise InvalidAssetError(f"Video {asset_id} has no source file to process")

        for progress in self._milestones:
            # Event.wait doubles as the pause and the cancellation check.
            if cancel_event.wait(self._milestone_interval):
                raise ProcessingCancelledError()
            self._store.update_status(
                asset_id,
                {"processing_progress": progress},
                expected=_PROCESSING,
                expected_job_id=job_id,
            )
            logger.debug("Video %s progress %d%%", asset_id, progress)

        if cancel_event.is_set():
            raise ProcessingCancelledError()

        result = self._collaborator.process(asset)
        if not isinstance(result, Artifacts):
            raise CollaboratorError(
                f"AI service returned {type(result).__name__} instead of artifacts"
            )
        missing = [f.name for f in fields(result) if getattr(result, f.name) is None]
        if missing:
            raise CollaboratorError(f"AI service returned no {', '.join(missing)}")
        if cancel_event.is_set():
            raise ProcessingCancelledError()

        self._store.update_status(
            asset_id,
            {
                "status": AssetStatus.COMPLETED,
                "processing_progress": 100,
                "error_message": None,
                "artifacts": result,
                "processed_at": utcnow(),
            },
            expected=_PROCESSING,
            expected_job_id=job_id,
        )
        logger.info("AI processing completed for video %s", asset_id)

    def _fail(self, asset_id: str, job_id: str, exc: Exception) -> None:
        message = str(exc) or type(exc).__name__
        if isinstance(exc, ProcessingCancelledError):
            logger.info("AI processing cancelled for video %s", asset_id)
        else:
            logger.error("AI processing failed for video %s: %s", asset_id, message, exc_info=exc)

        try:
            self._store.update_status(
                asset_id,
                {"status": AssetStatus.FAILED, "error_message": message, "artifacts": None},
                expected=_PROCESSING,
                expected_job_id=job_id,
            )
        except ProcessingConflictError:
            logger.info("Job %s no longer owns video %s; failure not recorded", job_id, asset_id)
        except Exception:  # noqa: BLE001 - nothing left to report to
            logger.exception(
                "Could not record failure for video %s (job %s); it may remain in processing",
                asset_id,
                job_id,
            )
