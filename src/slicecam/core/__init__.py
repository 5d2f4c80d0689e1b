"""
Core module - Shared utilities, configuration, and exceptions.
"""

from slicecam.core.config import (
    ConfigManager,
    MachiningSettings,
    MillingDirection,
    OffsetMode,
    PolygonOffsetMethod,
)
from slicecam.core.exceptions import (
    ConfigurationError,
    GeometryError,
    SliceCamError,
    SlicingError,
)
from slicecam.core.logging import configure_logging, get_logger

__all__ = [
    # Config
    "ConfigManager",
    "MachiningSettings",
    "MillingDirection",
    "OffsetMode",
    "PolygonOffsetMethod",
    # Exceptions
    "SliceCamError",
    "ConfigurationError",
    "GeometryError",
    "SlicingError",
    # Logging
    "configure_logging",
    "get_logger",
]
