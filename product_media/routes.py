# routes.py
# API endpoints

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from product_media.catalog import trigger_catalog_fetch
from product_media.dispatcher import request_generation
from product_media.executions import ExecutionStatusPoller
from product_media.models import GenerateRequest, JobHandle, JobStatus
from product_media.providers import ResultsStoreProvider, get_status_provider
from product_media.store import JobStore, record_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_store(request: Request) -> JobStore:
    return request.app.state.results_store


@router.post("/products/random")
def random_product():
    """Ask the catalog workflow for a random product and return it as-is."""
    return {"success": True, "data": trigger_catalog_fetch()}


@router.post("/generate", response_model=JobHandle, response_model_exclude_none=True)
def generate_media(body: GenerateRequest):
    """
    Start the image + video workflow for a product.
    Returns as soon as the workflow has accepted the job; poll
    /api/results/{job_id} or /api/status/{job_id} for the outcome.
    """
    return request_generation(body.product)


@router.post("/results/{job_id}")
async def receive_results(job_id: str, request: Request, store: JobStore = Depends(get_store)):
    """Completion callback from the workflow. A repeated callback replaces the earlier result."""
    try:
        body = await request.json()
        if not isinstance(body, dict):
            raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    except ValueError as e:
        logger.error("Rejected results callback for job %s: %s", job_id, e)
        return JSONResponse({"success": False, "error": "Failed to store results"}, status_code=500)

    record_result(store, job_id, body)
    logger.info(
        "Stored results for job %s (image=%s, video=%s, error=%s); %s entries held",
        job_id,
        "yes" if body.get("imageUrl") else "missing",
        "yes" if body.get("videoUrl") else "missing",
        body.get("error") or "none",
        len(store),
    )
    return {"success": True, "message": "Results stored successfully"}


@router.get("/results/{job_id}", response_model=JobStatus, response_model_exclude_none=True)
def get_results(job_id: str, store: JobStore = Depends(get_store)):
    return ResultsStoreProvider(store).status(job_id)


@router.get("/status/{job_id}", response_model=JobStatus, response_model_exclude_none=True)
def get_status(job_id: str):
    """Infer job progress from the n8n execution history."""
    return ExecutionStatusPoller().poll(job_id)


@router.get("/jobs/{job_id}", response_model=JobStatus, response_model_exclude_none=True)
def get_job(job_id: str, store: JobStore = Depends(get_store)):
    """Status from whichever provider STATUS_PROVIDER selects."""
    return get_status_provider(store).status(job_id)
