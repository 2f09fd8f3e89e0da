"""Safe import utilities for optional dependencies."""


def safe_import(module_name: str):
    """
    Safely import a module, returning None if unavailable.

    Use this for optional, vendor-specific dependencies that may not be
    installed on every host (e.g. NVML bindings on a machine without an
    NVIDIA driver).

    Args:
        module_name: The module to import (e.g., "pynvml")

    Returns:
        The imported module, or None if import fails

    Examples:
        >>> pynvml = safe_import("pynvml")
        >>> if pynvml:
        ...     pynvml.nvmlInit()
    """
    try:
        return __import__(module_name, fromlist=[''])
    except ImportError:
        return None
