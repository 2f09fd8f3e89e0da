"""Tests for remote catalog resolution."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from minerkit.models.catalog import descriptor_from_record, fetch_catalog, resolve_model
from minerkit.models.exceptions import (
    CatalogUnavailableError,
    IncompleteModelDetailsError,
    ModelNotFoundError,
)
from minerkit.models.schema import QuantizationMode


class TestResolveModel:
    """Tests for resolve_model()."""

    def test_resolves_gptq_model_with_branch(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            descriptor = resolve_model("mistralai/mixtral-8x7b-instruct-v0.1")

        assert descriptor.id == "mistralai/mixtral-8x7b-instruct-v0.1"
        assert descriptor.size_gb == 28
        assert descriptor.quantization is QuantizationMode.GPTQ
        assert descriptor.source_model_id == "TheBloke/Mixtral-8x7B-Instruct-v0.1-GPTQ"
        assert descriptor.revision == "gptq-4bit-32g-actorder_True"

    def test_16b_type_means_unquantized(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            descriptor = resolve_model("meta-llama/llama-3-8b-instruct")

        assert descriptor.quantization is QuantizationMode.NONE
        assert descriptor.quantization.value == "None"

    def test_missing_branch_defaults_to_literal_none(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            descriptor = resolve_model("openhermes-mixtral-8x7b-gptq")

        assert descriptor.revision == "None"

    def test_match_is_case_sensitive(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            with pytest.raises(ModelNotFoundError):
                resolve_model("Meta-Llama/Llama-3-8B-Instruct")

    def test_unknown_model_raises(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            with pytest.raises(ModelNotFoundError, match="nonexistent-id"):
                resolve_model("nonexistent-id")

    def test_uses_given_url_and_timeout(self, catalog_response):
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response) as mock_get:
            resolve_model("openhermes-mixtral-8x7b-gptq", "https://example.test/m.json", timeout=5)

        mock_get.assert_called_once_with("https://example.test/m.json", timeout=5)

    def test_record_without_size_still_resolves(self, catalog_response):
        """Missing fields are reported later by the completeness check."""
        with patch("minerkit.models.catalog.requests.get", return_value=catalog_response):
            descriptor = resolve_model("broken-model")

        assert descriptor.size_gb is None
        assert descriptor.missing_fields() == ["size_gb", "source_model_id"]


class TestFetchCatalog:
    """Tests for fetch_catalog() failure modes."""

    def test_network_error(self):
        with patch(
            "minerkit.models.catalog.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(CatalogUnavailableError, match="unreachable"):
                fetch_catalog("https://example.test/models.json")

    def test_http_error(self):
        response = Mock(content=b"not found")
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        with patch("minerkit.models.catalog.requests.get", return_value=response):
            with pytest.raises(CatalogUnavailableError):
                fetch_catalog()

    def test_empty_body(self):
        response = Mock(content=b"  \n")
        response.raise_for_status.return_value = None
        with patch("minerkit.models.catalog.requests.get", return_value=response):
            with pytest.raises(CatalogUnavailableError, match="empty"):
                fetch_catalog()

    def test_invalid_json(self):
        response = Mock(content=b"<html>")
        response.raise_for_status.return_value = None
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        with patch("minerkit.models.catalog.requests.get", return_value=response):
            with pytest.raises(CatalogUnavailableError, match="Invalid JSON"):
                fetch_catalog()

    def test_non_array_payload(self):
        response = Mock(content=b'{"models": []}')
        response.raise_for_status.return_value = None
        response.json.return_value = {"models": []}
        with patch("minerkit.models.catalog.requests.get", return_value=response):
            with pytest.raises(CatalogUnavailableError, match="not a JSON array"):
                fetch_catalog()


class TestDescriptorFromRecord:
    """Tests for record-to-descriptor conversion."""

    def test_missing_type_is_gptq(self):
        descriptor = descriptor_from_record({"name": "x", "size_gb": 4, "hf_id": "org/x"})
        assert descriptor.quantization is QuantizationMode.GPTQ

    def test_null_branch_is_literal_none(self):
        descriptor = descriptor_from_record(
            {"name": "x", "size_gb": 4, "type": "llm_16b", "hf_id": "org/x", "hf_branch": None}
        )
        assert descriptor.revision == "None"

    def test_non_positive_size_rejected(self):
        with pytest.raises(IncompleteModelDetailsError):
            descriptor_from_record({"name": "x", "size_gb": 0, "type": "llm", "hf_id": "org/x"})

    def test_required_mb_rounds(self):
        descriptor = descriptor_from_record({"name": "x", "size_gb": 4.5, "hf_id": "org/x"})
        assert descriptor.required_mb == 4608
