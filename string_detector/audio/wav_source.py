"""Frame source that replays a recorded audio file."""

from __future__ import annotations
from typing import Iterator, Optional

import numpy as np
import soundfile as sf

from ..logger import get_logger
from ..core.errors import DeviceUnavailableError, FrameReadError
from ..core.interfaces import IFrameSource
from ..string_types import FRAME_SIZE

logger = get_logger(__name__)


class WavFileFrameSource(IFrameSource):
    """Provides int16 mono frames by reading from a sound file."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = FRAME_SIZE,
        loop: bool = False,
        gain: float = 1.0,
    ):
        """Initialize the file source.

        Args:
            file_path: Path to any file format soundfile can read
            frame_size: Samples per frame
            loop: Rewind at end of file instead of running dry
            gain: Linear gain applied before conversion back to int16
        """
        self._file_path = file_path
        self._frame_size = frame_size
        self._loop = loop
        self._gain = gain
        self._file: Optional[sf.SoundFile] = None
        self._exhausted = False

        try:
            info = sf.info(self._file_path)
        except (RuntimeError, OSError) as e:
            # soundfile reports unreadable files as LibsndfileError (a RuntimeError)
            raise DeviceUnavailableError(f"Cannot read {file_path}: {e}") from e
        self._sample_rate = info.samplerate
        self._channels = info.channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def exhausted(self) -> bool:
        """True once a non-looping source has delivered its last samples."""
        return self._exhausted

    def open(self) -> None:
        if self._file is not None:
            return
        try:
            self._file = sf.SoundFile(self._file_path)
        except (RuntimeError, OSError) as e:
            raise DeviceUnavailableError(f"Cannot open {self._file_path}: {e}") from e
        self._exhausted = False
        logger.info(
            f"Replaying {self._file_path} ({self._sample_rate}Hz, {self._channels} channel(s))"
        )

    def read_frame(self) -> bytes:
        """Return the next frame. At end of file a non-looping source returns b''."""
        if self._file is None:
            raise FrameReadError("Audio file is not open")

        try:
            data = self._file.read(self._frame_size, dtype="int16", always_2d=True)
            if len(data) == 0 and self._loop:
                self._file.seek(0)
                data = self._file.read(self._frame_size, dtype="int16", always_2d=True)
        except (RuntimeError, OSError) as e:
            raise FrameReadError(f"Error reading {self._file_path}: {e}") from e

        if len(data) == 0:
            self._exhausted = True
            return b""

        samples = data[:, 0]
        if self._gain != 1.0:
            scaled = samples.astype(np.float64) * self._gain
            samples = np.clip(scaled, -32768, 32767).astype(np.int16)
        return samples.astype("<i2").tobytes()

    def iter_frames(self) -> Iterator[bytes]:
        """Yield every frame of the file once (ignores ``loop``)."""
        loop, self._loop = self._loop, False
        try:
            while True:
                frame = self.read_frame()
                if not frame:
                    return
                yield frame
        finally:
            self._loop = loop

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
