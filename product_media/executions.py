# executions.py
# Pull-based job status: scans the n8n execution history for a job id

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import requests

from product_media import config
from product_media.errors import (
    ConfigurationError,
    MalformedResponseError,
    RelayError,
    TransportError,
    UpstreamHttpError,
)

logger = logging.getLogger(__name__)

JOB_METADATA_NODE = "Add Job Metadata"
JOB_ID_NODE = "Generate Job ID"
RESULT_NODE = "Format Response"

# Workflow node name -> (progress, label). Nodes are checked independently,
# so the reported stage is the highest progress seen, not an execution trace.
STAGES: List[Tuple[str, int, str]] = [
    ("Extract Prompts", 30, "AI analyzing product..."),
    ("Create Image Task", 40, "Creating AI image..."),
    ("Get Image", 50, "Checking image status..."),
    ("Switch 2", 60, "Processing image..."),
    ("Parse Image Result", 70, "Image complete!"),
    ("Create Video Task", 75, "Creating AI video..."),
    ("Get Video", 85, "Checking video status..."),
    ("Switch ", 90, "Processing video..."),
    ("Format Response", 95, "Finalizing..."),
    ("Image Failed", 65, "Image generation failed, checking..."),
    ("Video Failed", 90, "Video generation failed, checking..."),
]
INITIAL_STAGE = (10, "Initializing...")
QUEUED_STAGE = (5, "Job queued or initializing...")

RESULT_FIELDS = ("imageUrl", "videoUrl", "imagePrompt", "videoPrompt", "productName")


def node_output(run_data: Dict[str, Any], node: str) -> Optional[dict]:
    """First JSON item a node emitted, i.e. runData[node][0].data.main[0][0].json."""
    runs = run_data.get(node)
    if not runs:
        return None
    try:
        return runs[0]["data"]["main"][0][0]["json"]
    except (KeyError, IndexError, TypeError):
        return None


def infer_progress(run_data: Dict[str, Any]) -> Tuple[int, str]:
    progress, label = INITIAL_STAGE
    best = None
    for node, stage_progress, stage_label in STAGES:
        if node not in run_data:
            continue
        # Ties go to the later table entry
        if best is None or stage_progress >= best:
            best = stage_progress
            progress, label = stage_progress, stage_label
    return progress, label


def extract_job_id(run_data: Dict[str, Any]) -> Optional[str]:
    for node in (JOB_METADATA_NODE, JOB_ID_NODE):
        if run_data.get(node):
            output = node_output(run_data, node)
            return output.get("jobId") if output else None
    return None


class ExecutionStatusPoller:
    """Queries the n8n REST API (v1) for the execution that carries a job id."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 workflow_id: Optional[str] = None, limit: Optional[int] = None):
        self.api_key = api_key or config.N8N_API_KEY
        self.base_url = (base_url or config.N8N_BASE_URL or "").rstrip("/")
        self.workflow_id = workflow_id or config.N8N_WORKFLOW_ID
        self.limit = limit or config.N8N_EXECUTIONS_LIMIT

    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        return requests.get(
            f"{self.base_url}/api/v1{path}",
            params=params,
            headers={"X-N8N-API-KEY": self.api_key},
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )

    def list_executions(self) -> List[dict]:
        try:
            response = self._get("/executions", params={"workflowId": self.workflow_id, "limit": self.limit})
        except requests.RequestException as e:
            logger.error("n8n request failed: %s", e)
            raise TransportError(str(e)) from e
        if not response.ok:
            logger.error("Failed to query n8n: %s %s", response.status_code, response.text[:200])
            raise UpstreamHttpError(
                response.status_code,
                f"Failed to query n8n: {response.status_code}",
                body_excerpt=response.text[:200],
                http_status=500,
            )
        try:
            return response.json().get("data") or []
        except (ValueError, AttributeError) as e:
            raise MalformedResponseError("n8n returned an unreadable executions listing") from e

    def get_execution(self, execution_id) -> Optional[dict]:
        """Detailed run data for one execution, or None if it could not be fetched."""
        try:
            response = self._get(f"/executions/{execution_id}", params={"includeData": "true"})
        except requests.RequestException as e:
            logger.warning("Skipping execution %s: %s", execution_id, e)
            return None
        if not response.ok:
            logger.warning("Skipping execution %s: HTTP %s", execution_id, response.status_code)
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("Skipping execution %s: body is not JSON", execution_id)
            return None

    def poll(self, job_id: str) -> dict:
        if not self.api_key or not self.base_url:
            raise ConfigurationError("N8N API not configured")

        for execution in self.list_executions():
            detail = self.get_execution(execution.get("id"))
            if not detail:
                continue
            result_data = (detail.get("data") or {}).get("resultData") or {}
            run_data = result_data.get("runData")
            if not run_data or extract_job_id(run_data) != job_id:
                continue

            status = execution.get("status")
            logger.info("Job %s matched execution %s (%s)", job_id, execution.get("id"), status)
            if status == "success":
                outcome = self._finished(run_data)
                if outcome is not None:
                    return outcome
            elif status in ("running", "waiting"):
                progress, label = infer_progress(run_data)
                return {"success": False, "status": "processing", "message": label, "progress": progress}
            elif status == "error":
                error = (result_data.get("error") or {}).get("message") or "Unknown error"
                return {"success": False, "status": "failed", "error": error}

        progress, label = QUEUED_STAGE
        return {"success": False, "status": "processing", "message": label, "progress": progress}

    def _finished(self, run_data: Dict[str, Any]) -> Optional[dict]:
        metadata = node_output(run_data, JOB_METADATA_NODE)
        if metadata and (metadata.get("success") is False or metadata.get("error")):
            return {
                "success": False,
                "status": "failed",
                "error": metadata.get("error") or "Media generation failed",
            }

        if not run_data.get(RESULT_NODE):
            return None
        media = node_output(run_data, RESULT_NODE) or {}
        data = {field: media.get(field) for field in RESULT_FIELDS}
        data["generatedAt"] = media.get("generatedAt") or datetime.now(timezone.utc).isoformat()
        return {"success": True, "status": "completed", "data": data}


def poll_status(job_id: str, poller: Optional[ExecutionStatusPoller] = None) -> dict:
    poller = poller or ExecutionStatusPoller()
    try:
        return poller.poll(job_id)
    except RelayError as e:
        return e.to_dict()
