# catalog.py
# Random product fetch through the catalog webhook

import logging
from typing import Optional

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

TRIGGER_PAYLOAD = {"trigger": "start"}
NO_CACHE_HEADERS = {"Content-Type": "application/json", "Cache-Control": "no-store"}


def trigger_catalog_fetch(webhook_url: Optional[str] = None) -> dict:
    """
    POST the fixed trigger payload to the catalog webhook and return the
    product it answers with. The body is not validated: whatever JSON the
    workflow returns is handed back unchanged.
    """
    webhook_url = webhook_url or config.CATALOG_WEBHOOK_URL
    if not webhook_url:
        raise ConfigurationError("Webhook URL not configured")

    try:
        response = requests.post(
            webhook_url,
            json=TRIGGER_PAYLOAD,
            headers=NO_CACHE_HEADERS,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("Catalog webhook request failed: %s", e)
        raise TransportError(str(e)) from e

    if not response.ok:
        logger.error("Catalog webhook returned %s", response.status_code)
        raise UpstreamHttpError(response.status_code, f"HTTP error! status: {response.status_code}")

    try:
        product = response.json()
    except ValueError as e:
        raise MalformedResponseError("Catalog webhook returned a body that is not valid JSON") from e

    logger.info("Fetched product %s", product.get("name") if isinstance(product, dict) else "<non-object>")
    return product


def fetch_random_product(webhook_url: Optional[str] = None) -> dict:
    try:
        return {"success": True, "data": trigger_catalog_fetch(webhook_url)}
    except RelayError as e:
        return {"success": False, "error": e.message}
