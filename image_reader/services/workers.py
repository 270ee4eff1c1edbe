"""
Background workers for image reads.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

LOGGER = logging.getLogger(__name__)

JobCallable = Callable[[Dict[str, Any] | None], Any]


@dataclass
class JobRecord:
    """Represents a queued, running or finished job."""

    id: str
    type: str
    payload: Dict[str, Any] | None
    state: str = "queued"  # queued|running|completed|failed
    errors: list[str] = field(default_factory=list)
    result: Any = None
    created_at: float = field(default_factory=time.time)
    started_at: float | None = None
    finished_at: float | None = None
    future: Future | None = None


class JobManager:
    """In-process job manager. Jobs run to completion; there is no cancellation."""

    def __init__(self, max_workers: int = 2, thread_name_prefix: str = "image-reader") -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
        self._jobs: dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def enqueue(self, job_type: str, func: JobCallable, payload: Dict[str, Any] | None = None) -> str:
        job_id = str(uuid.uuid4())
        record = JobRecord(id=job_id, type=job_type, payload=payload)
        with self._lock:
            # submit raises RuntimeError once the executor is shut down; nothing is recorded then
            record.future = self._executor.submit(self._run_job, record, func)
            self._jobs[job_id] = record
        LOGGER.debug("Queued %s job %s", job_type, job_id)
        return job_id

    def _run_job(self, record: JobRecord, func: JobCallable) -> None:
        with self._lock:
            record.state = "running"
            record.started_at = time.time()
        try:
            result = func(record.payload)
            with self._lock:
                record.state = "completed"
                record.result = result
        except Exception as exc:
            LOGGER.exception("Job %s (%s) failed", record.id, record.type)
            with self._lock:
                record.state = "failed"
                record.errors.append(str(exc))
        finally:
            with self._lock:
                record.finished_at = time.time()

    def inspect(self, job_id: str) -> dict[str, Any]:
        with self._lock:
            record = self._jobs.get(job_id)
            if record is None:
                raise KeyError(f"Unknown job {job_id}")
            return {
                "id": record.id,
                "type": record.type,
                "state": record.state,
                "errors": list(record.errors),
                "result": record.result,
                "created_at": record.created_at,
                "started_at": record.started_at,
                "finished_at": record.finished_at,
            }

    def wait(self, job_id: str, timeout: float | None = None) -> bool:
        """Block until the job finishes. Returns False if the timeout elapsed first."""
        with self._lock:
            record = self._jobs.get(job_id)
            future = record.future if record else None
        if future is None:
            return True
        done, _ = wait([future], timeout=timeout)
        return bool(done)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
