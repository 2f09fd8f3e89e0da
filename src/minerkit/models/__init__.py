"""
Model resolution, capacity checks and utilization planning.

Resolves catalog model ids and validates that a model fits on the selected GPU.
"""

from .exceptions import (
    MinerkitError,
    ConnectivityError,
    CatalogUnavailableError,
    ModelNotFoundError,
    IncompleteModelDetailsError,
    DeviceQueryError,
    InsufficientMemoryError,
    MissingWorkerError,
    InvalidLaunchFlagError,
)
from .schema import (
    QuantizationMode,
    ModelDescriptor,
    DeviceMemoryState,
    UtilizationPlan,
    LaunchFlags,
    LaunchConfig,
)
from .catalog import CATALOG_URL, fetch_catalog, resolve_model
from .memory_validator import check_capacity, get_available_memory_mb
from .utilization import RATIO_RULES, RatioRule, compute_ratio, plan_utilization

__all__ = [
    # Primary API
    "resolve_model",
    "check_capacity",
    "compute_ratio",
    "plan_utilization",

    # Advanced usage
    "fetch_catalog",
    "get_available_memory_mb",
    "CATALOG_URL",
    "RATIO_RULES",
    "RatioRule",

    # Types
    "QuantizationMode",
    "ModelDescriptor",
    "DeviceMemoryState",
    "UtilizationPlan",
    "LaunchFlags",
    "LaunchConfig",

    # Exceptions
    "MinerkitError",
    "ConnectivityError",
    "CatalogUnavailableError",
    "ModelNotFoundError",
    "IncompleteModelDetailsError",
    "DeviceQueryError",
    "InsufficientMemoryError",
    "MissingWorkerError",
    "InvalidLaunchFlagError",
]
