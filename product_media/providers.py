# providers.py
# One status interface over the push (callback) and pull (execution scan) paths

import logging
from typing import Optional

from product_media import config
from product_media.errors import ConfigurationError
from product_media.executions import ExecutionStatusPoller, poll_status
from product_media.store import JobStore, get_result

logger = logging.getLogger(__name__)


class JobStatusProvider:
    name = "base"

    def status(self, job_id: str) -> dict:
        raise NotImplementedError


class ResultsStoreProvider(JobStatusProvider):
    """Answers from results the workflow pushed to /api/results/{job_id}."""

    name = "results"

    def __init__(self, store: JobStore):
        self.store = store

    def status(self, job_id: str) -> dict:
        result = get_result(self.store, job_id)
        if result is None:
            return {"success": False, "status": "processing", "message": "Results not yet available"}
        return {"success": True, "status": "completed", "data": result}


class ExecutionHistoryProvider(JobStatusProvider):
    """Answers by scanning the n8n execution history."""

    name = "executions"

    def __init__(self, poller: Optional[ExecutionStatusPoller] = None):
        self.poller = poller

    def status(self, job_id: str) -> dict:
        return poll_status(job_id, self.poller)


def get_status_provider(store: JobStore, kind: Optional[str] = None) -> JobStatusProvider:
    kind = (kind or config.STATUS_PROVIDER or "results").lower()
    if kind == ResultsStoreProvider.name:
        return ResultsStoreProvider(store)
    if kind == ExecutionHistoryProvider.name:
        return ExecutionHistoryProvider()
    logger.error("Unknown STATUS_PROVIDER %r", kind)
    raise ConfigurationError(f"Unknown status provider '{kind}'")
