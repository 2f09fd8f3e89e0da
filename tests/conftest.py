"""Shared pytest fixtures for minerkit tests."""

import json
import logging
from unittest.mock import Mock

import pytest

from minerkit.config import Settings
from minerkit.models.schema import ModelDescriptor, QuantizationMode


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo configure_logging() after each test so caplog keeps seeing records."""
    package_logger = logging.getLogger("minerkit")
    saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)
    yield
    handlers, level, propagate = saved
    package_logger.handlers = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


@pytest.fixture
def catalog_records():
    """Sample models.json records."""
    return [
        {
            "name": "mistralai/mixtral-8x7b-instruct-v0.1",
            "size_gb": 28,
            "type": "llm_gptq",
            "hf_id": "TheBloke/Mixtral-8x7B-Instruct-v0.1-GPTQ",
            "hf_branch": "gptq-4bit-32g-actorder_True",
        },
        {
            "name": "openhermes-mixtral-8x7b-gptq",
            "size_gb": 28,
            "type": "llm_gptq",
            "hf_id": "TheBloke/OpenHermes-2.5-Mistral-7B-GPTQ",
        },
        {
            "name": "meta-llama/llama-3-8b-instruct",
            "size_gb": 16,
            "type": "llm_16b",
            "hf_id": "meta-llama/Meta-Llama-3-8B-Instruct",
            "hf_branch": "main",
        },
        {
            "name": "broken-model",
            "type": "llm_16b",
        },
    ]


@pytest.fixture
def catalog_response(catalog_records):
    """Mock requests.Response carrying the sample catalog."""
    body = json.dumps(catalog_records)
    response = Mock(status_code=200, content=body.encode())
    response.json.return_value = catalog_records
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def descriptor():
    """A complete 16 GB unquantized descriptor."""
    return ModelDescriptor(
        id="meta-llama/llama-3-8b-instruct",
        size_gb=16,
        quantization=QuantizationMode.NONE,
        source_model_id="meta-llama/Meta-Llama-3-8B-Instruct",
        revision="main",
    )


class FakeDeviceQuery:
    """Device query returning a fixed list of free MB per GPU."""

    def __init__(self, free_mb):
        self.free_mb = list(free_mb)
        self.calls = 0

    def free_memory_mb(self):
        self.calls += 1
        return list(self.free_mb)


@pytest.fixture
def fake_device_query():
    return FakeDeviceQuery


@pytest.fixture
def worker_dir(tmp_path):
    """Directory holding a single worker script."""
    (tmp_path / "llm-miner-starter.py").write_text("import sys\nsys.exit(0)\n")
    return tmp_path


@pytest.fixture
def settings(worker_dir):
    """Settings with the connectivity check disabled and a temp worker dir."""
    return Settings(
        connectivity_check=False,
        worker_dir=str(worker_dir),
        catalog_url="https://example.test/models.json",
    )
