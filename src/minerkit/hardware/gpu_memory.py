#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
GPU free-memory detection.

Two interchangeable backends report free device memory in MB, one entry per
GPU, ordered by index:

- NvmlDeviceQuery: direct NVML calls through pynvml (nvidia-ml-py). This is
  the default; it needs no external binary and no text parsing.
- NvidiaSmiDeviceQuery: runs `nvidia-smi --query-gpu=memory.free` and parses
  its CSV output. Useful inside containers that ship the driver utilities
  but not the NVML Python bindings.

Both raise DeviceQueryError on any failure so the caller can abort cleanly.
"""

import logging
import subprocess
import threading
from typing import List, Optional, Protocol

from ..models.exceptions import DeviceQueryError
from ..utils import safe_import

logger = logging.getLogger(__name__)

NVIDIA_SMI_COMMAND = [
    "nvidia-smi",
    "--query-gpu=memory.free",
    "--format=csv,noheader,nounits",
]
DEFAULT_QUERY_TIMEOUT = 15  # seconds

BYTES_PER_MB = 1024 * 1024


class DeviceQuery(Protocol):
    """Anything that can report free memory (MB) per GPU index."""

    def free_memory_mb(self) -> List[int]:
        ...


class NvmlDeviceQuery:
    """
    Reads free VRAM for every visible NVIDIA GPU via NVML.

    NVML calls can block indefinitely on a wedged driver, so the query runs on
    a daemon thread and is abandoned after `timeout` seconds. A daemon thread
    does not hold up interpreter exit the way an executor worker would.
    """

    def __init__(self, pynvml=None, timeout: Optional[float] = DEFAULT_QUERY_TIMEOUT):
        self._pynvml = pynvml
        self.timeout = timeout

    def _load(self):
        pynvml = self._pynvml or safe_import("pynvml")
        if pynvml is None:
            raise DeviceQueryError(
                "NVML bindings (nvidia-ml-py) not installed. Unable to check available VRAM."
            )
        return pynvml

    def free_memory_mb(self) -> List[int]:
        pynvml = self._load()
        outcome = {}

        def run_query():
            try:
                outcome["free_mb"] = self._query(pynvml)
            except Exception as e:
                outcome["error"] = e

        worker = threading.Thread(target=run_query, name="nvml-query", daemon=True)
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            raise DeviceQueryError(f"NVML query timed out after {self.timeout}s")
        if "error" in outcome:
            raise outcome["error"]
        return outcome["free_mb"]

    def _query(self, pynvml) -> List[int]:
        try:
            pynvml.nvmlInit()
        except pynvml.NVMLError as e:
            raise DeviceQueryError(f"NVIDIA driver/GPU not found or NVML error: {e}") from e

        try:
            device_count = pynvml.nvmlDeviceGetCount()
            free_mb = []
            for i in range(device_count):
                handle = pynvml.nvmlDeviceGetHandleByIndex(i)
                mem_info = pynvml.nvmlDeviceGetMemoryInfo(handle)
                free_mb.append(int(mem_info.free // BYTES_PER_MB))
            return free_mb
        except pynvml.NVMLError as e:
            raise DeviceQueryError(f"Failed to fetch available VRAM: {e}") from e
        finally:
            try:
                pynvml.nvmlShutdown()
            except pynvml.NVMLError:
                pass


class NvidiaSmiDeviceQuery:
    """Reads free VRAM by running nvidia-smi."""

    def __init__(self, timeout: float = DEFAULT_QUERY_TIMEOUT, command: Optional[List[str]] = None):
        self.timeout = timeout
        self.command = command or list(NVIDIA_SMI_COMMAND)

    def free_memory_mb(self) -> List[int]:
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise DeviceQueryError("nvidia-smi tool not found. Unable to check available VRAM.") from e
        except subprocess.TimeoutExpired as e:
            raise DeviceQueryError(f"nvidia-smi timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise DeviceQueryError(
                f"nvidia-smi exited with status {result.returncode}: {result.stderr.strip()}"
            )

        return parse_free_memory(result.stdout)


def parse_free_memory(output: str) -> List[int]:
    """
    Parse `memory.free` CSV output (one MB value per line) into integers.

    Raises:
        DeviceQueryError: If a non-empty line is not a finite, non-negative number
    """
    values = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            free_mb = int(float(line))
        except (ValueError, OverflowError) as e:
            raise DeviceQueryError(f"Unexpected nvidia-smi output line: {line!r}") from e
        if free_mb < 0:
            raise DeviceQueryError(f"Negative free memory reported by nvidia-smi: {line!r}")
        values.append(free_mb)
    return values


def get_device_query(backend: str = "nvml", timeout: float = DEFAULT_QUERY_TIMEOUT) -> DeviceQuery:
    """
    Return the device query implementation for a backend name.

    Args:
        backend: "nvml" or "nvidia-smi"
        timeout: Query timeout in seconds

    Raises:
        ValueError: For an unknown backend name
    """
    if backend == "nvml":
        return NvmlDeviceQuery(timeout=timeout)
    elif backend == "nvidia-smi":
        return NvidiaSmiDeviceQuery(timeout=timeout)
    raise ValueError(f"Unknown device query backend: {backend!r}")
