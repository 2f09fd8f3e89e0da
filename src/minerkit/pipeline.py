"""
Launch pipeline.

Runs each step in order, each one a hard gate:

1. connectivity check (optional)
2. resolve the catalog descriptor
3. parse trailing flags
4. check the descriptor is complete
5. check GPU capacity on the first id in --gpu-ids
6. compute the utilization ratio
7. locate and launch the worker

Any failure raises a MinerkitError before the worker is started.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .config import Settings
from .hardware.gpu_memory import DeviceQuery, get_device_query
from .launch.flags import parse_launch_flags
from .launch.orchestrator import build_launch_config, ensure_complete, find_worker_script, launch_worker
from .models.catalog import resolve_model
from .models.exceptions import ConnectivityError
from .models.memory_validator import check_capacity
from .models.utilization import plan_utilization
from .utils.network import check_internet

logger = logging.getLogger(__name__)


def validate_connectivity(settings: Settings) -> None:
    """
    Raises:
        ConnectivityError: If the configured host is unreachable
    """
    host, port = settings.connectivity_host, settings.connectivity_port
    if not check_internet(host, port):
        raise ConnectivityError(
            f"Unable to connect to {host}:{port}. Check your internet connection or access to the site."
        )
    logger.info(f"Connectivity to {host} verified.")


def run_pipeline(
    model_id: str,
    flag_tokens: Sequence[str] = (),
    settings: Optional[Settings] = None,
    device_query: Optional[DeviceQuery] = None,
    worker_path: Optional[Union[str, Path]] = None,
) -> int:
    """
    Resolve, validate and launch a model worker.

    Args:
        model_id: Catalog model id
        flag_tokens: Trailing launcher flags
        settings: Run configuration (defaults to Settings())
        device_query: Free-memory source (defaults to settings.device_backend)
        worker_path: Worker script (defaults to a search of settings.worker_dir)

    Returns:
        The worker's exit status

    Raises:
        MinerkitError: On any resolution or validation failure
    """
    settings = settings or Settings()

    if settings.connectivity_check:
        validate_connectivity(settings)

    descriptor = resolve_model(model_id, settings.catalog_url, timeout=settings.request_timeout)
    flags = parse_launch_flags(flag_tokens)
    ensure_complete(descriptor)

    device_query = device_query or get_device_query(
        settings.device_backend, timeout=settings.device_query_timeout
    )
    memory = check_capacity(descriptor, flags.primary_gpu_index, device_query)

    plan = plan_utilization(descriptor.id, memory.available_mb)
    logger.info(f"GPU Memory Utilization ratio for vllm: {plan.ratio:.2f} (rule: {plan.rule})")

    config = build_launch_config(descriptor, plan.ratio, flags)
    if worker_path is None:
        worker_path = find_worker_script(settings.worker_dir, settings.worker_pattern)

    return launch_worker(config, worker_path, python=settings.python_executable)
