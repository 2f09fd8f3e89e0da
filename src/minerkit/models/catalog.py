"""
Remote Model Catalog Client

Resolves a catalog model id to a ModelDescriptor by fetching the published
models.json array. A single request is made per resolution; there is no
retry and no local cache.
"""

import json
import logging
from typing import Any, Dict, List

import requests
from pydantic import ValidationError

from .exceptions import (
    CatalogUnavailableError,
    IncompleteModelDetailsError,
    ModelNotFoundError,
)
from .schema import ModelDescriptor, QuantizationMode

logger = logging.getLogger(__name__)

# ============================================================================
# CATALOG CONSTANTS
# ============================================================================

CATALOG_URL = "https://raw.githubusercontent.com/heurist-network/heurist-models/main/models.json"
DEFAULT_TIMEOUT = 30  # seconds

# Records whose 'type' contains this marker are served unquantized
UNQUANTIZED_TYPE_MARKER = "16b"

# Revision reported when the record has no 'hf_branch'
DEFAULT_REVISION = "None"


def fetch_catalog(url: str = CATALOG_URL, timeout: float = DEFAULT_TIMEOUT) -> List[Dict[str, Any]]:
    """
    Download and parse the model catalog.

    Args:
        url: Catalog URL returning a JSON array of model records
        timeout: Request timeout in seconds

    Returns:
        List of raw model records

    Raises:
        CatalogUnavailableError: If the catalog is unreachable, empty or not a JSON array
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise CatalogUnavailableError(f"Failed to fetch model details from {url}: {e}") from e

    if not response.content or not response.content.strip():
        raise CatalogUnavailableError(f"Failed to fetch model details from {url}: empty response")

    try:
        records = response.json()
    except (json.JSONDecodeError, ValueError) as e:
        raise CatalogUnavailableError(f"Invalid JSON in model catalog at {url}: {e}") from e

    if not isinstance(records, list):
        raise CatalogUnavailableError(
            f"Model catalog at {url} is not a JSON array (got {type(records).__name__})"
        )

    return records


def _quantization_from_type(model_type: Any) -> QuantizationMode:
    if isinstance(model_type, str) and UNQUANTIZED_TYPE_MARKER in model_type:
        return QuantizationMode.NONE
    return QuantizationMode.GPTQ


def descriptor_from_record(record: Dict[str, Any]) -> ModelDescriptor:
    """
    Build a ModelDescriptor from a raw catalog record.

    Missing 'size_gb' or 'hf_id' leave the corresponding field unset so the
    completeness check can report them; values that are present but invalid
    (e.g. a non-positive size) are rejected here.

    Raises:
        IncompleteModelDetailsError: If the record fails validation
    """
    model_id = record.get("name")
    revision = record.get("hf_branch")
    try:
        return ModelDescriptor(
            id=model_id,
            size_gb=record.get("size_gb"),
            quantization=_quantization_from_type(record.get("type")),
            source_model_id=record.get("hf_id"),
            revision=revision if revision is not None else DEFAULT_REVISION,
        )
    except ValidationError as e:
        raise IncompleteModelDetailsError(
            f"Catalog record has invalid model details: {e.error_count()} validation error(s)",
            model_id=model_id,
        ) from e


def resolve_model(
    model_id: str,
    catalog_url: str = CATALOG_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> ModelDescriptor:
    """
    Resolve a catalog model id to its descriptor.

    Matching is exact and case-sensitive on the record's 'name' field.

    Args:
        model_id: Catalog model id, e.g. "mistralai/mixtral-8x7b-instruct-v0.1"
        catalog_url: Catalog URL
        timeout: Request timeout in seconds

    Returns:
        ModelDescriptor for the first matching record

    Raises:
        CatalogUnavailableError: If the catalog cannot be fetched
        ModelNotFoundError: If no record matches model_id
        IncompleteModelDetailsError: If the matching record is malformed
    """
    logger.info(f"Fetching model details for {model_id}...")
    records = fetch_catalog(catalog_url, timeout=timeout)

    for record in records:
        if isinstance(record, dict) and record.get("name") == model_id:
            descriptor = descriptor_from_record(record)
            logger.info(
                f"Model details: HF_ID={descriptor.source_model_id}, Size_GB={descriptor.size_gb}, "
                f"Quantization={descriptor.quantization}, Revision={descriptor.revision}"
            )
            return descriptor

    raise ModelNotFoundError(f"Model ID '{model_id}' not found in models.json")
