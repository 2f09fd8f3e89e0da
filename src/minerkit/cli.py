#!/usr/bin/env python3
"""
Command-line entry point.

Usage:
    minerkit <model-id> [--miner-id-index N] [--port N] [--gpu-ids IDS]

Exit status is 0 once the worker has been launched and 1 on any
resolution or validation failure.
"""

import logging
import sys
from typing import Optional, Sequence

from .config import Settings, get_settings
from .models.exceptions import MinerkitError
from .pipeline import run_pipeline
from .utils.log import configure_logging

logger = logging.getLogger(__name__)

SUPPORTED_MODELS_URL = "https://docs.heurist.ai/integration/supported-models"


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting script execution...")
    if not argv or not argv[0] or argv[0].startswith("--"):
        logger.error(
            f"No model ID provided. Please provide a model ID. See {SUPPORTED_MODELS_URL} for supported models."
        )
        return 1

    model_id, flag_tokens = argv[0], argv[1:]
    try:
        worker_status = run_pipeline(model_id, flag_tokens, settings=settings)
    except MinerkitError as e:
        logger.error(str(e))
        return 1

    if worker_status != 0:
        logger.warning(f"Worker exited with status {worker_status}")
    else:
        logger.info("Python script executed successfully.")
    logger.info("Script execution completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
