"""Exceptions raised by string detector components."""


class StringDetectorError(Exception):
    """Base class for string detector errors."""


class DeviceUnavailableError(StringDetectorError):
    """The audio source could not be acquired; a session cannot start."""


class FrameReadError(StringDetectorError):
    """A frame could not be read mid-session. The cycle is skipped."""
