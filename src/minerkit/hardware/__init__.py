"""
GPU memory detection.

Reports free device memory per GPU index for the capacity check.
"""

from .gpu_memory import (
    DeviceQuery,
    NvmlDeviceQuery,
    NvidiaSmiDeviceQuery,
    get_device_query,
    parse_free_memory,
)

__all__ = [
    "DeviceQuery",
    "NvmlDeviceQuery",
    "NvidiaSmiDeviceQuery",
    "get_device_query",
    "parse_free_memory",
]
