"""
Worker launch utilities.

Parses the launcher's trailing flags and starts the worker process.
"""

from .flags import parse_launch_flags
from .orchestrator import (
    DEFAULT_WORKER_PATTERN,
    build_launch_config,
    ensure_complete,
    find_worker_script,
    launch_worker,
)

__all__ = [
    "parse_launch_flags",
    "build_launch_config",
    "ensure_complete",
    "find_worker_script",
    "launch_worker",
    "DEFAULT_WORKER_PATTERN",
]
