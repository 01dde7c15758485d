"""Type definitions for the string detector."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

# A frame of mono 16-bit samples as delivered by a frame source.
AudioFrame = np.ndarray

SAMPLE_RATE = 44100  # Hz
FRAME_SIZE = 4096  # samples per frame (8192 bytes)
FULL_SCALE = 32768.0  # int16 full-scale amplitude

VOLUME_THRESHOLD = 0.03  # frames at or below this are treated as silence
REQUIRED_CONFIRMATIONS = 6
HISTORY_SIZE = 10
FREQUENCY_TOLERANCE = 15.0  # Hz


class GuitarString(Enum):
    """The six strings of a standard-tuned guitar, plus the NONE sentinel.

    Members are declared in ascending frequency order; the classifier relies on it.
    """

    NONE = ("-", "No string", 0.0, 0, (60, 60, 70))
    E_LOW = ("E", "Low E (6th)", 82.41, 6, (220, 50, 50))
    A = ("A", "A (5th)", 110.00, 5, (255, 140, 0))
    D = ("D", "D (4th)", 146.83, 4, (255, 215, 0))
    G = ("G", "G (3rd)", 196.00, 3, (50, 205, 50))
    B = ("B", "B (2nd)", 246.94, 2, (30, 144, 255))
    E_HIGH = ("E", "High E (1st)", 329.63, 1, (138, 43, 226))

    def __init__(
        self,
        symbol: str,
        display_name: str,
        frequency: float,
        string_number: int,
        color: Tuple[int, int, int],
    ):
        self.symbol = symbol
        self.display_name = display_name
        self.frequency = frequency
        self.string_number = string_number
        self.color = color

    @property
    def is_none(self) -> bool:
        return self is GuitarString.NONE

    def __str__(self):
        return self.symbol


# Target strings in ascending frequency order (NONE excluded)
GUITAR_STRINGS: Tuple[GuitarString, ...] = tuple(
    s for s in GuitarString if s is not GuitarString.NONE
)


@dataclass(frozen=True)
class FrequencyEstimate:
    """A confident pitch estimate for one frame."""

    frequency: float  # Hz
    correlation: float  # unnormalized autocorrelation at the chosen lag


@dataclass(frozen=True)
class TrackerState:
    """Lock state plus the rolling history of raw detections."""

    locked: GuitarString = GuitarString.NONE
    confirmation_count: int = 0
    history: Tuple[GuitarString, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    """Everything the presentation side may observe about the current cycle."""

    current_volume: float = 0.0
    current_string: GuitarString = GuitarString.NONE
    confirmation_count: int = 0
    required_confirmations: int = REQUIRED_CONFIRMATIONS
    raw_detection: GuitarString = GuitarString.NONE  # unstabilized per-frame guess
    frequency: Optional[float] = None  # Hz, None when gated or no pitch
    timestamp: float = 0.0
