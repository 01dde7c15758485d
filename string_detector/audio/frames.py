"""Conversion of raw capture buffers into audio frames."""

from typing import Sequence, Union

import numpy as np

from ..string_types import AudioFrame

FrameLike = Union[bytes, bytearray, memoryview, np.ndarray, Sequence[int]]


def frame_from_bytes(data: Union[bytes, bytearray, memoryview]) -> AudioFrame:
    """Decode 16-bit signed little-endian PCM into an int16 frame.

    A trailing odd byte is dropped; an empty buffer gives an empty frame.
    """
    usable = len(data) - (len(data) % 2)
    return np.frombuffer(bytes(data[:usable]), dtype="<i2").astype(np.int16)


def as_frame(data: FrameLike) -> AudioFrame:
    """Coerce bytes, arrays or integer sequences to a 1-D int16 frame."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return frame_from_bytes(data)
    frame = np.asarray(data)
    if frame.ndim > 1:
        # Multi-channel input: keep the first channel
        frame = frame[:, 0]
    if frame.dtype != np.int16:
        frame = frame.astype(np.int16)
    return frame
