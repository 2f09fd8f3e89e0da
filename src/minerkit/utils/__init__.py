"""Utility helpers."""

from .imports import safe_import
from .log import configure_logging
from .network import check_internet

__all__ = ["safe_import", "configure_logging", "check_internet"]
