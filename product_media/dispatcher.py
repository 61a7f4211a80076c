# dispatcher.py
# Hands a product to the media-generation workflow and returns its job handle

import logging
from typing import Optional, Union

import requests

from product_media import config
from product_media.errors import (
    ConfigurationError,
    MalformedResponseError,
    RelayError,
    TransportError,
    UnreachableWorkflowError,
    UpstreamHttpError,
)
from product_media.models import Product

logger = logging.getLogger(__name__)

HANDLE_FIELDS = ("success", "status", "jobId", "productName", "message", "data")


def looks_like_html(body: str) -> bool:
    return body.strip().lower().startswith("<!doctype")


def job_links(job_id: str, base_url: Optional[str] = None) -> dict:
    """Absolute results/status URLs for a job, or {} when no base URL is set."""
    base_url = base_url or config.BASE_URL
    if not base_url:
        return {}
    base_url = base_url.rstrip("/")
    return {
        "resultsUrl": f"{base_url}/api/results/{job_id}",
        "statusUrl": f"{base_url}/api/status/{job_id}",
    }


def request_generation(product: Union[Product, dict], webhook_url: Optional[str] = None) -> dict:
    """
    POST {"product": product} to the generation webhook.

    Only acceptance is confirmed; the workflow runs on asynchronously and
    reports back through /api/results or its execution history. The upstream
    answer is trusted and copied field by field.
    """
    webhook_url = webhook_url or config.MEDIA_GEN_WEBHOOK_URL
    if not webhook_url:
        logger.error("Media generation webhook URL not configured")
        raise ConfigurationError("Media generation webhook URL not configured")

    if isinstance(product, Product):
        product = product.payload()
    logger.info("Requesting media generation for %s", product.get("name"))

    try:
        response = requests.post(
            webhook_url,
            json={"product": product},
            headers={"Content-Type": "application/json", "Cache-Control": "no-store"},
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("Generation webhook request failed: %s", e)
        raise TransportError(str(e)) from e

    if not response.ok:
        body = response.text
        logger.error("Generation webhook returned %s: %s", response.status_code, body[:200])
        if looks_like_html(body):
            raise UnreachableWorkflowError(
                response.status_code,
                f"Webhook error ({response.status_code}): Unable to reach n8n workflow. Please check webhook URL.",
            )
        raise UpstreamHttpError(
            response.status_code,
            f"HTTP {response.status_code}: {body[:100]}",
            body_excerpt=body[:200],
        )

    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError("Generation webhook returned a body that is not valid JSON") from e
    if not isinstance(data, dict):
        raise MalformedResponseError("Generation webhook returned JSON that is not an object")

    handle = {field: data.get(field) for field in HANDLE_FIELDS}
    if handle["jobId"]:
        handle.update(job_links(handle["jobId"]))
        logger.info("Generation accepted, job %s (%s)", handle["jobId"], handle["status"])
    return handle


def start_generation(product: Union[Product, dict], webhook_url: Optional[str] = None) -> dict:
    try:
        return request_generation(product, webhook_url)
    except RelayError as e:
        return e.to_dict()
