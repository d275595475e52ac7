import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from threading import Event, Lock
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class _ActiveJob:
    job_id: str
    future: Future
    cancel_event: Event


class JobDispatcher:
    """
    Runs background jobs on a worker pool, one task per asset id.

    Job lifetimes are independent of the request that submitted them. Each job
    gets its own cancellation Event which the job is expected to check between
    units of work.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asset-job")
        self._jobs: Dict[str, _ActiveJob] = {}
        self._lock = Lock()

    def submit(self, asset_id: str, job_id: str, job: Callable[[Event], None]) -> Future:
        cancel_event = Event()
        with self._lock:
            future = self._executor.submit(job, cancel_event)
            self._jobs[asset_id] = _ActiveJob(job_id=job_id, future=future, cancel_event=cancel_event)
        future.add_done_callback(lambda f: self._forget(asset_id, f))
        logger.debug("Dispatched job %s for video %s", job_id, asset_id)
        return future

    def _forget(self, asset_id: str, future: Future) -> None:
        with self._lock:
            active = self._jobs.get(asset_id)
            if active is not None and active.future is future:
                del self._jobs[asset_id]

    def is_active(self, asset_id: str) -> bool:
        """Operational helper: whether a job for ``asset_id`` is still running."""
        with self._lock:
            active = self._jobs.get(asset_id)
            return active is not None and not active.future.done()

    def cancel(self, asset_id: str, job_id: Optional[str] = None) -> bool:
        """
        Signal the job for ``asset_id`` to stop. With ``job_id`` only that job is
        signalled, never a newer one for the same asset. Returns False if no
        matching job is running.
        """
        with self._lock:
            active = self._jobs.get(asset_id)
        if active is None or active.future.done():
            return False
        if job_id is not None and active.job_id != job_id:
            return False
        active.cancel_event.set()
        return True

    def wait(self, asset_id: str, timeout: Optional[float] = None) -> bool:
        """
        Operational helper: block until the job for ``asset_id`` finishes.
        Returns False on timeout.
        """
        with self._lock:
            active = self._jobs.get(asset_id)
        if active is None:
            return True
        try:
            active.future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            for active in self._jobs.values():
                active.cancel_event.set()
        self._executor.shutdown(wait=wait)
