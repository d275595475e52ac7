from dataclasses import replace
from threading import Lock
from typing import Any, Collection, Dict, List, Optional

from backend.domain.errors import AssetNotFoundError, ProcessingConflictError, StoreError
from backend.domain.models import Asset, AssetStatus, Project, utcnow

# Fields the pipeline is allowed to write through update_status.
UPDATABLE_FIELDS = frozenset(
    {"status", "processing_progress", "error_message", "artifacts", "processed_at", "job_id"}
)


class InMemoryAssetRepository:
    """
    In-memory status store for assets.

    Records are immutable snapshots. Writers for the same asset are serialized
    by a per-asset lock and swap in a new snapshot; readers do a plain dict
    lookup and never wait on a writer.

    In a real production system, this would be backed by Postgres, DynamoDB, etc.
    """

    def __init__(self) -> None:
        self._assets: Dict[str, Asset] = {}
        self._record_locks: Dict[str, Lock] = {}
        self._lock = Lock()

    def _record_lock(self, asset_id: str) -> Lock:
        with self._lock:
            lock = self._record_locks.get(asset_id)
            if lock is None:
                lock = self._record_locks[asset_id] = Lock()
            return lock

    def add(self, asset: Asset) -> None:
        with self._record_lock(asset.id):
            if asset.id in self._assets:
                raise StoreError(f"Video already exists: {asset.id}")
            self._assets[asset.id] = asset

    def read(self, asset_id: str) -> Optional[Asset]:
        return self._assets.get(asset_id)

    def update_status(
        self,
        asset_id: str,
        fields: Dict[str, Any],
        *,
        expected: Optional[Collection[AssetStatus]] = None,
        expected_job_id: Optional[str] = None,
    ) -> Asset:
        """
        Atomically apply ``fields`` to one asset and return the new snapshot.

        Only the supplied fields change. When ``expected`` is given the update
        is applied only if the current status is one of them, otherwise
        ProcessingConflictError is raised and nothing is written. ``expected_job_id``
        does the same for the job that currently owns the record, so a superseded
        job can never overwrite a newer one.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise StoreError(f"Cannot update fields: {sorted(unknown)}")

        with self._record_lock(asset_id):
            current = self._assets.get(asset_id)
            if current is None:
                raise AssetNotFoundError(asset_id)
            if expected is not None and current.status not in expected:
                raise ProcessingConflictError(asset_id, current.status.value, "update")
            if expected_job_id is not None and current.job_id != expected_job_id:
                raise ProcessingConflictError(asset_id, current.status.value, "update")

            new_status = fields.get("status", current.status)
            new_progress = fields.get("processing_progress", current.processing_progress)
            if not 0 <= new_progress <= 100:
                raise StoreError(f"Progress out of range: {new_progress}")
            if (
                current.status == AssetStatus.PROCESSING
                and new_status == AssetStatus.PROCESSING
                and new_progress < current.processing_progress
            ):
                raise StoreError(
                    f"Progress cannot go backwards ({current.processing_progress} -> {new_progress})"
                )

            updated = replace(current, updated_at=utcnow(), **fields)
            self._assets[asset_id] = updated
            return updated

    def delete(
        self,
        asset_id: str,
        *,
        expected: Optional[Collection[AssetStatus]] = None,
    ) -> Asset:
        with self._record_lock(asset_id):
            current = self._assets.get(asset_id)
            if current is None:
                raise AssetNotFoundError(asset_id)
            if expected is not None and current.status not in expected:
                raise ProcessingConflictError(asset_id, current.status.value, "delete")
            del self._assets[asset_id]
        with self._lock:
            self._record_locks.pop(asset_id, None)
        return current

    def list_by_project(self, project_id: str) -> List[Asset]:
        assets = [a for a in list(self._assets.values()) if a.project_id == project_id]
        return sorted(assets, key=lambda a: a.created_at, reverse=True)

    def list_by_status(self, status: AssetStatus) -> List[Asset]:
        return [a for a in list(self._assets.values()) if a.status == status]


class InMemoryProjectRepository:
    """Project directory used to resolve which identity owns an asset."""

    def __init__(self) -> None:
        self._projects: Dict[str, Project] = {}
        self._lock = Lock()

    def save(self, project: Project) -> None:
        with self._lock:
            self._projects[project.id] = project

    def get(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)
