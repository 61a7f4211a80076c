# config.py
# Configuration

import logging
import os
from dotenv import load_dotenv

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


def env_number(name: str, default, cast=float):
    """Numeric setting; a malformed value falls back to the default with a warning."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s, using %r", name, raw, cast.__name__, default)
        return default


# Outbound n8n webhooks
CATALOG_WEBHOOK_URL = os.getenv("CATALOG_WEBHOOK_URL")
MEDIA_GEN_WEBHOOK_URL = os.getenv("MEDIA_GEN_WEBHOOK_URL")

# Public base URL of this service, used for absolute results/status links
BASE_URL = os.getenv("BASE_URL")

# n8n REST API (pull-based status)
N8N_API_KEY = os.getenv("N8N_API_KEY")
N8N_BASE_URL = os.getenv("N8N_BASE_URL")
N8N_WORKFLOW_ID = os.getenv("N8N_WORKFLOW_ID", "LYyh2ovT6sJoxGiG")  # Product Media Generation workflow
N8N_EXECUTIONS_LIMIT = env_number("N8N_EXECUTIONS_LIMIT", 50, int)

# "results" (callback-fed store) or "executions" (n8n history scan)
STATUS_PROVIDER = os.getenv("STATUS_PROVIDER", "results")

# Unset means the transport default (no timeout)
HTTP_TIMEOUT_SECONDS = env_number("HTTP_TIMEOUT_SECONDS", None)

POLL_INTERVAL_SECONDS = env_number("POLL_INTERVAL_SECONDS", 3.0)
ESTIMATED_GENERATION_SECONDS = env_number("ESTIMATED_GENERATION_SECONDS", 300, int)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
