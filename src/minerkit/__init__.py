"""
MinerKit - Model resolution, GPU preflight and worker launch for LLM miners.

Submodules:
    - minerkit.models: Catalog resolution, capacity check, utilization planning
    - minerkit.hardware: GPU free-memory detection
    - minerkit.launch: Flag parsing and worker launch
"""

# models must load before hardware: hardware imports models.exceptions
from . import models
from . import hardware
from . import launch

# Top-level convenience exports (most common operations)
from .models import (
    resolve_model,
    check_capacity,
    compute_ratio,
    plan_utilization,
    ModelDescriptor,
    LaunchConfig,
    MinerkitError,
)
from .launch import parse_launch_flags, launch_worker
from .pipeline import run_pipeline

__version__ = "0.1.0"

__all__ = [
    # Submodules
    "models",
    "hardware",
    "launch",

    # Primary API
    "resolve_model",
    "check_capacity",
    "compute_ratio",
    "plan_utilization",
    "parse_launch_flags",
    "launch_worker",
    "run_pipeline",
    "ModelDescriptor",
    "LaunchConfig",
    "MinerkitError",
]
