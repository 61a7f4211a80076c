"""Tests for the catalog webhook relay"""

from unittest.mock import patch

import pytest
import requests

from product_media.catalog import TRIGGER_PAYLOAD, fetch_random_product, trigger_catalog_fetch
from product_media.errors import (
    ConfigurationError,
    MalformedResponseError,
    TransportError,
    UpstreamHttpError,
)


class TestTriggerCatalogFetch:

    def test_returns_product_unchanged(self, configured, make_response, product):
        """Test the product JSON comes back verbatim, images in their original order"""
        with patch("product_media.catalog.requests.post", return_value=make_response(200, product)) as post:
            result = trigger_catalog_fetch()

        assert result == product
        assert result["images"] == [
            "https://cf.cjdropshipping.com/a.jpg",
            "https://cf.cjdropshipping.com/c.jpg",
            "https://cf.cjdropshipping.com/b.jpg",
        ]
        args, kwargs = post.call_args
        assert args[0] == "https://n8n.example.com/webhook/catalog"
        assert kwargs["json"] == TRIGGER_PAYLOAD == {"trigger": "start"}
        assert kwargs["headers"]["Cache-Control"] == "no-store"

    def test_unvalidated_payload_passes_through(self, configured, make_response):
        """Test a payload that does not look like a product is still returned"""
        with patch("product_media.catalog.requests.post", return_value=make_response(200, {"unexpected": True})):
            assert trigger_catalog_fetch() == {"unexpected": True}

    def test_missing_url(self, unconfigured):
        with patch("product_media.catalog.requests.post") as post:
            with pytest.raises(ConfigurationError, match="Webhook URL not configured"):
                trigger_catalog_fetch()
        post.assert_not_called()

    def test_upstream_http_error(self, configured, make_response):
        with patch("product_media.catalog.requests.post", return_value=make_response(404, text="Not Found")):
            with pytest.raises(UpstreamHttpError) as exc_info:
                trigger_catalog_fetch()
        assert exc_info.value.status == 404
        assert exc_info.value.message == "HTTP error! status: 404"

    def test_transport_error(self, configured):
        with patch("product_media.catalog.requests.post", side_effect=requests.ConnectionError("connection reset")):
            with pytest.raises(TransportError, match="connection reset"):
                trigger_catalog_fetch()

    def test_malformed_body(self, configured, make_response):
        with patch("product_media.catalog.requests.post", return_value=make_response(200, text="not json")):
            with pytest.raises(MalformedResponseError):
                trigger_catalog_fetch()

    def test_explicit_url_overrides_config(self, unconfigured, make_response, product):
        with patch("product_media.catalog.requests.post", return_value=make_response(200, product)) as post:
            trigger_catalog_fetch("https://other.example.com/hook")
        assert post.call_args[0][0] == "https://other.example.com/hook"


class TestFetchRandomProduct:

    def test_success_envelope(self, configured, make_response, product):
        with patch("product_media.catalog.requests.post", return_value=make_response(200, product)):
            assert fetch_random_product() == {"success": True, "data": product}

    def test_failure_envelope(self, configured, make_response):
        with patch("product_media.catalog.requests.post", return_value=make_response(500, text="boom")):
            assert fetch_random_product() == {"success": False, "error": "HTTP error! status: 500"}
