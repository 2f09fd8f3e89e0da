"""
Custom exceptions for minerkit.

Every failure in the launch pipeline is terminal: the CLI reports the
message and exits with status 1 without starting the worker.
"""

from typing import Optional


class MinerkitError(Exception):
    """Base class for all launch pipeline failures."""

    def __init__(self, message: str, model_id: Optional[str] = None):
        """
        Initialize MinerkitError.

        Args:
            message: Error message describing what went wrong
            model_id: Optional model identifier for better error messages
        """
        self.model_id = model_id
        full_message = message
        if model_id:
            full_message += f" (model: {model_id})"
        super().__init__(full_message)


class ConnectivityError(MinerkitError):
    """Raised when the connectivity check cannot reach its target host."""


class CatalogUnavailableError(MinerkitError):
    """Raised when the model catalog cannot be fetched or is empty/malformed."""


class ModelNotFoundError(MinerkitError):
    """Raised when the catalog has no record whose name matches the model id."""


class IncompleteModelDetailsError(MinerkitError):
    """Raised when a catalog record lacks size, quantization, source id or revision."""


class DeviceQueryError(MinerkitError):
    """Raised when free GPU memory cannot be queried for the requested index."""


class InsufficientMemoryError(MinerkitError):
    """Raised when the selected GPU has less free memory than the model requires."""

    def __init__(self, available_mb: int, required_mb: int, model_id: Optional[str] = None):
        self.available_mb = available_mb
        self.required_mb = required_mb
        super().__init__(
            f"Insufficient VRAM. Available: {available_mb}MB, Required: {required_mb}MB.",
            model_id=model_id,
        )


class MissingWorkerError(MinerkitError):
    """Raised when no worker script can be located."""


class InvalidLaunchFlagError(MinerkitError):
    """Raised when a recognized launch flag carries an unusable value."""
