import json

import pytest
import requests
from fastapi.testclient import TestClient

from product_media import config
from product_media.main import create_app
from product_media.store import InMemoryJobStore


def _response(status_code=200, body=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def make_response():
    """Build a real requests.Response with the given status and JSON body (or raw text)."""
    return _response


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(config, "CATALOG_WEBHOOK_URL", "https://n8n.example.com/webhook/catalog")
    monkeypatch.setattr(config, "MEDIA_GEN_WEBHOOK_URL", "https://n8n.example.com/webhook/media")
    monkeypatch.setattr(config, "BASE_URL", None)
    monkeypatch.setattr(config, "N8N_API_KEY", "test-key")
    monkeypatch.setattr(config, "N8N_BASE_URL", "https://n8n.example.com")
    monkeypatch.setattr(config, "N8N_WORKFLOW_ID", "wf-1")
    monkeypatch.setattr(config, "STATUS_PROVIDER", "results")
    monkeypatch.setattr(config, "HTTP_TIMEOUT_SECONDS", None)
    return config


@pytest.fixture
def unconfigured(monkeypatch):
    for name in ("CATALOG_WEBHOOK_URL", "MEDIA_GEN_WEBHOOK_URL", "BASE_URL", "N8N_API_KEY", "N8N_BASE_URL"):
        monkeypatch.setattr(config, name, None)
    return config


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


@pytest.fixture
def product():
    return {
        "id": "CJ-1001",
        "name": "Wireless Earbuds",
        "description": "Bluetooth 5.3 earbuds with charging case",
        "price": 19.99,
        "originalPrice": 39.99,
        "currency": "USD",
        "images": [
            "https://cf.cjdropshipping.com/a.jpg",
            "https://cf.cjdropshipping.com/c.jpg",
            "https://cf.cjdropshipping.com/b.jpg",
        ],
        "mainImage": "https://cf.cjdropshipping.com/a.jpg",
        "categoryId": "cat-9",
        "categoryName": "Audio",
        "variants": [{"vid": "v1", "color": "black"}],
        "shipFromCountries": ["CN", "US"],
        "sourceUrl": "https://cjdropshipping.com/product/1001",
        "fetchedAt": "2025-01-10T12:00:00.000Z",
    }
