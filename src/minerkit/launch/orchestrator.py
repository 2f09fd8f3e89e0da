"""
Worker Launch

Assembles the final LaunchConfig from the resolved descriptor, the
utilization ratio and the parsed flags, and runs the worker script as a
blocking child process.

The worker path is always passed in explicitly. find_worker_script() is the
helper callers use to locate it by naming convention.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

from ..models.exceptions import IncompleteModelDetailsError, MissingWorkerError
from ..models.schema import LaunchConfig, LaunchFlags, ModelDescriptor

logger = logging.getLogger(__name__)

DEFAULT_WORKER_PATTERN = "llm-miner-*.py"


def ensure_complete(descriptor: ModelDescriptor) -> None:
    """
    Check that every field the worker needs is present.

    Raises:
        IncompleteModelDetailsError: If size, quantization, source id or revision is missing
    """
    missing = descriptor.missing_fields()
    if missing:
        raise IncompleteModelDetailsError(
            f"Failed to fetch model details, missing: {', '.join(missing)}",
            model_id=descriptor.id,
        )


def find_worker_script(
    directory: Union[str, Path] = ".",
    pattern: str = DEFAULT_WORKER_PATTERN,
) -> Path:
    """
    Locate the worker script by naming convention.

    Args:
        directory: Directory to search
        pattern: Glob pattern for the worker file name

    Returns:
        The first match in sorted order

    Raises:
        MissingWorkerError: If nothing matches
    """
    matches = sorted(p for p in Path(directory).glob(pattern) if p.is_file())
    if not matches:
        raise MissingWorkerError(f"No Python script matching '{pattern}' found in {directory}")
    if len(matches) > 1:
        logger.warning(f"Multiple worker scripts match '{pattern}', using {matches[0].name}")
    return matches[0]


def build_launch_config(
    descriptor: ModelDescriptor,
    ratio: float,
    flags: Optional[LaunchFlags] = None,
) -> LaunchConfig:
    """
    Combine the descriptor, ratio and flags into the worker's parameter set.

    Raises:
        IncompleteModelDetailsError: If the descriptor is incomplete
    """
    ensure_complete(descriptor)
    flags = flags or LaunchFlags()
    return LaunchConfig(
        source_model_id=descriptor.source_model_id,
        quantization=descriptor.quantization,
        model_id=descriptor.id,
        ratio=ratio,
        revision=descriptor.revision,
        miner_id_index=flags.miner_id_index,
        port=flags.port,
        gpu_ids=flags.gpu_ids,
    )


def launch_worker(
    config: LaunchConfig,
    worker_path: Union[str, Path],
    python: Optional[str] = None,
) -> int:
    """
    Run the worker with the launch parameters and wait for it to exit.

    Args:
        config: Complete launch configuration
        worker_path: Path to the worker script
        python: Interpreter used to run the script (defaults to sys.executable)

    Returns:
        The worker's exit status

    Raises:
        MissingWorkerError: If worker_path does not exist or cannot be executed
    """
    worker_path = Path(worker_path)
    if not worker_path.is_file():
        raise MissingWorkerError(f"Worker script not found: {worker_path}")

    cmd = [python or sys.executable, str(worker_path), *config.to_argv()]
    logger.info(
        f"Executing Python script with model ID: {config.model_id}, Quantization: {config.quantization}, "
        f"HuggingFace model ID: {config.source_model_id}, Revision: {config.revision}, "
        f"Miner ID Index: {config.miner_id_index}, Port: {config.port}, GPU IDs: {config.gpu_ids}"
    )
    logger.debug(f"Worker command: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, check=False)
    except OSError as e:
        raise MissingWorkerError(f"Failed to start worker {worker_path}: {e}") from e

    return result.returncode
