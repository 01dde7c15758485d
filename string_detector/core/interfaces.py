"""Defines the core interfaces for the string detector."""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..string_types import Snapshot


class IFrameSource(ABC):
    """Interface for blocking sources of 16-bit mono audio frames."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the source. Raises DeviceUnavailableError on failure."""
        pass

    @abstractmethod
    def read_frame(self) -> bytes:
        """Block until a frame is available and return its raw little-endian bytes.

        Raises FrameReadError on a transient failure.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the source."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the source is currently acquired."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the frames in Hz."""
        pass

    @property
    @abstractmethod
    def frame_size(self) -> int:
        """The maximum number of samples returned per read."""
        pass


class IStringDetectionService(ABC):
    """Interface for the listening session controller."""

    @abstractmethod
    def start(self) -> None:
        """Start the read-process-publish loop."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop the loop and release the frame source."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Clear the lock state and detection history."""
        pass

    @abstractmethod
    def get_snapshot(self) -> Snapshot:
        """Return the most recently published snapshot."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the service is running."""
        pass
