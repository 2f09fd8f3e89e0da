"""
Launcher flag parsing.

Trailing flags are read pairwise: each recognized flag consumes itself and
the following token. Parsing stops at the first token that is not a
recognized flag, and everything after it is ignored. A recognized flag at
the very end with no value also stops parsing. argparse cannot express the
stop-at-first-unknown rule, hence the explicit loop.
"""

import logging
from typing import Sequence

from ..models.exceptions import InvalidLaunchFlagError
from ..models.schema import LaunchFlags

logger = logging.getLogger(__name__)

FLAG_FIELDS = {
    "--miner-id-index": "miner_id_index",
    "--port": "port",
    "--gpu-ids": "gpu_ids",
}


def _parse_int(flag: str, value: str, minimum: int = 0) -> int:
    try:
        number = int(value)
    except ValueError:
        raise InvalidLaunchFlagError(f"{flag} expects an integer, got {value!r}") from None
    if number < minimum:
        raise InvalidLaunchFlagError(f"{flag} must be >= {minimum}, got {number}")
    return number


def parse_launch_flags(tokens: Sequence[str]) -> LaunchFlags:
    """
    Parse --miner-id-index, --port and --gpu-ids from trailing tokens.

    Args:
        tokens: Invocation tokens after the model id

    Returns:
        LaunchFlags with defaults for anything not given

    Raises:
        InvalidLaunchFlagError: If an integer flag has a non-integer or negative value,
            or --gpu-ids does not start with a numeric GPU index
    """
    values = {}
    i = 0
    while i < len(tokens):
        flag = tokens[i]
        field = FLAG_FIELDS.get(flag)
        if field is None:
            logger.debug(f"Stopping flag parsing at unrecognized token {flag!r}")
            break
        if i + 1 >= len(tokens):
            logger.debug(f"Stopping flag parsing: {flag} has no value")
            break

        value = tokens[i + 1]
        if field == "gpu_ids":
            values[field] = value
        else:
            values[field] = _parse_int(flag, value, minimum=1 if field == "port" else 0)
        i += 2

    flags = LaunchFlags(**values)
    try:
        gpu_index = flags.primary_gpu_index
    except ValueError:
        raise InvalidLaunchFlagError(
            f"--gpu-ids must be comma-separated GPU indices, got {flags.gpu_ids!r}"
        ) from None
    if gpu_index < 0:
        raise InvalidLaunchFlagError(f"--gpu-ids must not be negative, got {flags.gpu_ids!r}")
    return flags
