"""
Model Capacity Check

Validates that the selected GPU has enough free memory to host a model
before the worker is started.

Only one GPU index is checked per run. The check is a snapshot: another
process may claim memory between this check and the worker start, which
the launcher does not guard against.
"""

import logging
from typing import Optional

from ..hardware.gpu_memory import DeviceQuery, NvmlDeviceQuery
from .exceptions import DeviceQueryError, InsufficientMemoryError
from .schema import DeviceMemoryState, ModelDescriptor

# Module logger
logger = logging.getLogger(__name__)


def _log_capacity_result(state: DeviceMemoryState, model_id: str) -> None:
    """Log capacity check details using the module logger."""
    icon = "[✓]" if state.fits else "[✗]"
    status_text = "PASSED" if state.fits else "FAILED"

    log_fn = logger.info if state.fits else logger.error
    log_fn(
        f"{icon} Capacity: {status_text} | {model_id} on GPU {state.gpu_index} | "
        f"Available VRAM: {state.available_mb}MB, Required VRAM: {state.required_mb}MB"
    )


def get_available_memory_mb(gpu_index: int, device_query: Optional[DeviceQuery] = None) -> int:
    """
    Get free device memory for a single GPU.

    Args:
        gpu_index: 0-based GPU index
        device_query: Free-memory source; NVML when omitted

    Returns:
        Free memory in MB

    Raises:
        DeviceQueryError: If the query fails or has no entry for gpu_index
    """
    if gpu_index < 0:
        raise DeviceQueryError(f"Invalid GPU index {gpu_index}")

    device_query = device_query or NvmlDeviceQuery()
    free_mb = device_query.free_memory_mb()

    if gpu_index >= len(free_mb):
        raise DeviceQueryError(
            f"Failed to fetch available VRAM for GPU {gpu_index} "
            f"({len(free_mb)} device(s) reported)"
        )

    return free_mb[gpu_index]


def check_capacity(
    descriptor: ModelDescriptor,
    gpu_index: int,
    device_query: Optional[DeviceQuery] = None,
) -> DeviceMemoryState:
    """
    Check that a GPU has at least the model's required memory free.

    Args:
        descriptor: Resolved model descriptor (size_gb must be set)
        gpu_index: 0-based GPU index to check
        device_query: Free-memory source; NVML when omitted

    Returns:
        DeviceMemoryState with available_mb exactly as reported by the device

    Raises:
        DeviceQueryError: If free memory cannot be determined
        InsufficientMemoryError: If available_mb < required_mb
    """
    required_mb = descriptor.required_mb
    logger.info("Validating available VRAM against model requirements...")

    available_mb = get_available_memory_mb(gpu_index, device_query)
    state = DeviceMemoryState(
        gpu_index=gpu_index,
        available_mb=available_mb,
        required_mb=required_mb,
    )
    _log_capacity_result(state, descriptor.id)

    if not state.fits:
        raise InsufficientMemoryError(available_mb, required_mb, model_id=descriptor.id)

    return state
