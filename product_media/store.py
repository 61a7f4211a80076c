# store.py
# Results store fed by the workflow's completion callback

import threading
from datetime import datetime, timezone
from typing import Dict, Optional


class JobStore:
    """Storage for the last result received per job id.

    Callers only depend on this interface. The in-memory implementation below
    is for a single process; a multi-instance deployment needs a shared
    implementation behind the same methods.
    """

    def put(self, job_id: str, payload: dict) -> None:
        raise NotImplementedError

    def get(self, job_id: str) -> Optional[dict]:
        raise NotImplementedError

    def delete(self, job_id: str) -> bool:
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError


class InMemoryJobStore(JobStore):
    # Unbounded and never evicted: entries live until the process exits.

    def __init__(self):
        self._results: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def put(self, job_id: str, payload: dict) -> None:
        with self._lock:
            self._results[job_id] = payload

    def get(self, job_id: str) -> Optional[dict]:
        with self._lock:
            return self._results.get(job_id)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._results.pop(job_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


def record_result(store: JobStore, job_id: str, payload: dict) -> dict:
    """Store a callback payload, replacing any earlier one for the same job.

    Two callbacks for one job are not merged; the one that finishes last wins.
    """
    entry = {**payload, "receivedAt": datetime.now(timezone.utc).isoformat()}
    store.put(job_id, entry)
    return entry


def get_result(store: JobStore, job_id: str) -> Optional[dict]:
    return store.get(job_id)
