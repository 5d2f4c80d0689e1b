"""
Custom exceptions for SliceCAM.

All SliceCAM exceptions inherit from SliceCamError for easy catching.
"""

from typing import Any


class SliceCamError(Exception):
    """Base exception for all SliceCAM errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SliceCamError):
    """Raised when configuration or machining settings are invalid or missing."""

    pass


class GeometryError(SliceCamError):
    """Raised when an element cannot be parsed or converted to a mesh."""

    def __init__(
        self,
        message: str,
        element_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.element_type = element_type


class SlicingError(SliceCamError):
    """Raised when slicing/toolpath generation fails."""

    pass
