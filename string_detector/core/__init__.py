"""Core components for the string detector."""

# Import interfaces and errors for easier access
from .interfaces import IFrameSource, IStringDetectionService
from .errors import DeviceUnavailableError, FrameReadError, StringDetectorError

__all__ = [
    "IFrameSource",
    "IStringDetectionService",
    "DeviceUnavailableError",
    "FrameReadError",
    "StringDetectorError",
]
