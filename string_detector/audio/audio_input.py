"""Live frame capture from a sound card."""

from __future__ import annotations
from typing import Any, ClassVar, Dict, List, Optional

import numpy as np
import sounddevice as sd

from ..logger import get_logger
from ..core.errors import DeviceUnavailableError, FrameReadError
from ..core.interfaces import IFrameSource
from ..string_types import FRAME_SIZE, SAMPLE_RATE

logger = get_logger(__name__)


class SoundDeviceFrameSource(IFrameSource):
    """Blocking int16 frame reader on top of a sounddevice input stream."""

    SAMPLE_RATE: ClassVar[int] = SAMPLE_RATE
    FRAME_SIZE: ClassVar[int] = FRAME_SIZE
    CHANNELS: ClassVar[int] = 1

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the frame source. The device is not touched until open().

        Args:
            device_id: Audio input device ID, or None for the default input
            sample_rate: Sample rate in Hz, or None for default (44100)
            frame_size: Samples per frame, or None for default (4096)
            channels: Channels to capture; only the first is delivered
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frame_size = frame_size or self.FRAME_SIZE
        self._channels = channels or self.CHANNELS
        self._stream: Optional[sd.InputStream] = None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        if self._stream is not None:
            logger.warning("Audio input already open")
            return

        try:
            sd.check_input_settings(
                device=self._device_id,
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="int16",
            )
            stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                channels=self._channels,
                blocksize=self._frame_size,
                dtype="int16",
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            logger.error(f"Cannot open audio input device {self._device_id}: {e}")
            raise DeviceUnavailableError(
                f"Cannot access audio input device {self._device_id}: {e}"
            ) from e

        self._stream = stream
        logger.info(
            f"Audio input started: device={self._device_id}, rate={self._sample_rate}Hz, "
            f"frame={self._frame_size} samples"
        )

    def read_frame(self) -> bytes:
        if self._stream is None:
            raise FrameReadError("Audio input is not open")

        try:
            data, overflowed = self._stream.read(self._frame_size)
        except sd.PortAudioError as e:
            raise FrameReadError(f"Audio read failed: {e}") from e

        if overflowed:
            logger.debug("Audio input overflow")

        # Keep the first channel only
        samples = np.asarray(data, dtype=np.int16)
        if samples.ndim > 1:
            samples = samples[:, 0]
        return samples.astype("<i2").tobytes()

    def close(self) -> None:
        if self._stream is None:
            return

        stream, self._stream = self._stream, None
        try:
            stream.stop()
            stream.close()
            logger.info("Audio input stopped")
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")


def list_input_devices() -> List[Dict[str, Any]]:
    """Return the devices that can record, with their sounddevice indices."""
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "max_input_channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


def default_input_device() -> Optional[int]:
    """Index of the system default input device, or None if there is none."""
    device = sd.default.device[0]
    if device is None or device < 0:
        return None
    return int(device)
