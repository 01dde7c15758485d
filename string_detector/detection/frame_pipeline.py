"""Per-frame orchestration: volume gate, pitch, classification, stabilization."""

from __future__ import annotations
import time
from typing import Optional

from ..logger import get_logger
from ..audio.frames import FrameLike, as_frame
from ..audio.pitch_estimator import PitchEstimator
from ..audio.volume_meter import calculate_volume
from ..string_types import VOLUME_THRESHOLD, GuitarString, Snapshot
from .stability_tracker import StabilityTracker
from .string_classifier import StringClassifier

logger = get_logger(__name__)


class FramePipeline:
    """Turns each incoming frame into a Snapshot.

    Frames at or below ``volume_threshold`` skip pitch estimation entirely
    and count as a NONE detection.
    """

    def __init__(
        self,
        pitch_estimator: Optional[PitchEstimator] = None,
        classifier: Optional[StringClassifier] = None,
        tracker: Optional[StabilityTracker] = None,
        volume_threshold: float = VOLUME_THRESHOLD,
    ) -> None:
        self._pitch_estimator = pitch_estimator or PitchEstimator()
        self._classifier = classifier or StringClassifier()
        self._tracker = tracker or StabilityTracker()
        self._volume_threshold = volume_threshold

    @property
    def tracker(self) -> StabilityTracker:
        return self._tracker

    @property
    def volume_threshold(self) -> float:
        return self._volume_threshold

    def process(self, frame: FrameLike, timestamp: Optional[float] = None) -> Snapshot:
        """Run one frame through the pipeline and update the lock state.

        Args:
            frame: int16 samples or raw little-endian bytes; short, odd or
                empty buffers are accepted
            timestamp: Capture time, defaults to now

        Returns:
            The Snapshot for this cycle
        """
        samples = as_frame(frame)
        volume = calculate_volume(samples)

        detection = GuitarString.NONE
        frequency = None
        if volume > self._volume_threshold:
            estimate = self._pitch_estimator.estimate(samples)
            if estimate is not None:
                frequency = estimate.frequency
                detection = self._classifier.classify(frequency)
        else:
            logger.debug(f"Volume {volume:.4f} below threshold, gating frame")

        state = self._tracker.update(detection)
        return Snapshot(
            current_volume=volume,
            current_string=state.locked,
            confirmation_count=state.confirmation_count,
            required_confirmations=self._tracker.required_confirmations,
            raw_detection=detection,
            frequency=frequency,
            timestamp=time.time() if timestamp is None else timestamp,
        )

    def reset(self) -> Snapshot:
        """Clear the tracker and return the resulting empty Snapshot."""
        self._tracker.reset()
        return Snapshot(
            required_confirmations=self._tracker.required_confirmations,
            timestamp=time.time(),
        )
