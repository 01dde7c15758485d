"""Frame loudness measurement used to gate pitch analysis."""

import numpy as np

from ..string_types import FULL_SCALE
from .frames import FrameLike, as_frame


def calculate_volume(frame: FrameLike) -> float:
    """Mean absolute amplitude of a frame, normalized to int16 full scale.

    This is deliberately not RMS. An empty frame has volume 0.

    Args:
        frame: int16 samples (or raw little-endian bytes)

    Returns:
        sum(|sample|) / len(frame) / 32768
    """
    samples = as_frame(frame)
    if samples.size == 0:
        return 0.0
    total = np.abs(samples.astype(np.int64)).sum()
    return float(total) / samples.size / FULL_SCALE
