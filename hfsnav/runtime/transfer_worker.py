"""Background worker for long-running transfer batches.

Jobs run one at a time, in submission order, on a single daemon thread.
Cache invalidations a job requests are recorded instead of applied; the
owner thread drains finished results and applies them there, in order.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

logger = logging.getLogger(__name__)

JobBody = Callable[[Callable[[str], object]], object]


@dataclass(frozen=True)
class TransferJob:
    """One queued batch."""

    job_id: int
    label: str
    body: JobBody


@dataclass(frozen=True)
class TransferResult:
    """Finished batch with the invalidations it still needs applied."""

    job: TransferJob
    value: object
    error: BaseException | None
    invalidations: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return self.error is None


class TransferWorker:
    """Single-threaded FIFO transfer runner."""

    def __init__(self, thread_name: str = "hfsnav-transfer") -> None:
        self._thread_name = thread_name
        self._lock = threading.Lock()
        self._pending: deque[TransferJob] = deque()
        self._running = False
        self._next_job_id = 1
        self._results: Queue[TransferResult] = Queue()

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running or bool(self._pending)

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                job = self._pending.popleft()

            recorded: list[str] = []
            value: object = None
            error: BaseException | None = None
            try:
                value = job.body(recorded.append)
            except Exception as exc:
                logger.warning("Transfer job %d (%s) failed: %s", job.job_id, job.label, exc)
                error = exc
            self._results.put(
                TransferResult(
                    job=job,
                    value=value,
                    error=error,
                    invalidations=tuple(recorded),
                )
            )

    def submit(self, label: str, body: JobBody) -> int:
        """Queue ``body`` and return its job id.

        ``body`` receives an invalidation sink and must not touch the cache
        directly.
        """
        with self._lock:
            job = TransferJob(job_id=self._next_job_id, label=label, body=body)
            self._next_job_id += 1
            self._pending.append(job)
            if self._running:
                return job.job_id
            self._running = True

        worker = threading.Thread(target=self._worker, name=self._thread_name, daemon=True)
        worker.start()
        return job.job_id

    def drain_results(self) -> list[TransferResult]:
        """Drain all finished results in completion order."""
        out: list[TransferResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def apply_results(self, invalidate: Callable[[str], object]) -> list[TransferResult]:
        """Drain results and apply each one's invalidations before the next."""
        results = self.drain_results()
        for result in results:
            for path in result.invalidations:
                invalidate(path)
        return results


__all__ = [
    "JobBody",
    "TransferJob",
    "TransferResult",
    "TransferWorker",
]
