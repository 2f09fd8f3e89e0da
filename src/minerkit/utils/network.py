import logging
import socket

logger = logging.getLogger(__name__)

DEFAULT_HOST = "huggingface.co"
DEFAULT_PORT = 443


def check_internet(host=DEFAULT_HOST, port=DEFAULT_PORT, timeout=3):
    """
    Checks for internet connectivity by attempting to create a TCP socket
    connection to the given host. Model weights are pulled from the
    HuggingFace Hub by the worker, so that is the default target.

    Args:
        host (str): Hostname or IP address to connect to (default: huggingface.co).
        port (int): The port to connect to (default: 443/TCP).
        timeout (float): The timeout in seconds (default: 3).

    Returns:
        bool: True if connection is successful, False otherwise.
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            pass
        return True
    except OSError as e:
        logger.debug(f"Connectivity check to {host}:{port} failed: {e}")
        return False
