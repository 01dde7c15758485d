"""Fundamental frequency estimation by windowed autocorrelation."""

from __future__ import annotations
from typing import ClassVar, Optional

import numpy as np

from ..logger import get_logger
from ..string_types import FULL_SCALE, SAMPLE_RATE, FrequencyEstimate
from .frames import FrameLike, as_frame

logger = get_logger(__name__)


class PitchEstimator:
    """Estimate the dominant fundamental of a single plucked note.

    The frame is normalized to [-1, 1], Hann-windowed, and autocorrelated over
    the lag range covering ``min_frequency``..``max_frequency``. The lag with
    the largest correlation wins and is accepted only if that correlation
    exceeds ``correlation_threshold``.

    The correlation is *not* normalized by signal energy, so the threshold is
    effectively loudness dependent: quiet notes are rejected even when they
    are perfectly periodic.
    """

    DEFAULT_MIN_FREQUENCY: ClassVar[float] = 70.0  # Hz
    DEFAULT_MAX_FREQUENCY: ClassVar[float] = 400.0  # Hz
    DEFAULT_CORRELATION_THRESHOLD: ClassVar[float] = 0.4

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        min_frequency: float = DEFAULT_MIN_FREQUENCY,
        max_frequency: float = DEFAULT_MAX_FREQUENCY,
        correlation_threshold: float = DEFAULT_CORRELATION_THRESHOLD,
    ) -> None:
        """Initialize the estimator.

        Args:
            sample_rate: Audio sample rate in Hz
            min_frequency: Lowest fundamental searched (sets the longest lag)
            max_frequency: Highest fundamental searched (sets the shortest lag)
            correlation_threshold: Minimum unnormalized correlation to accept
        """
        if sample_rate <= 0:
            raise ValueError("Sample rate must be positive")
        if not 0 < min_frequency < max_frequency:
            raise ValueError("Frequency range must satisfy 0 < min_frequency < max_frequency")

        self._sample_rate = sample_rate
        self._min_frequency = min_frequency
        self._max_frequency = max_frequency
        self._correlation_threshold = correlation_threshold

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def min_period(self) -> int:
        """Shortest lag searched, in samples."""
        return int(round(self._sample_rate / self._max_frequency))

    @property
    def max_period(self) -> int:
        """Longest lag searched, in samples."""
        return int(round(self._sample_rate / self._min_frequency))

    @property
    def correlation_threshold(self) -> float:
        return self._correlation_threshold

    def estimate(self, frame: FrameLike) -> Optional[FrequencyEstimate]:
        """Estimate the fundamental frequency of a frame.

        Args:
            frame: int16 samples (or raw little-endian bytes)

        Returns:
            FrequencyEstimate, or None when no confident periodicity is found
        """
        samples = as_frame(frame)
        n = samples.size
        if n < 2:
            return None

        # Lags must stay below half the frame length
        first_lag = self.min_period
        last_lag = min(self.max_period, n // 2 - 1)
        if last_lag < first_lag:
            logger.debug(f"Frame of {n} samples too short for lag {first_lag}")
            return None

        windowed = self._windowed(samples)
        correlations = self._autocorrelation(windowed)[first_lag : last_lag + 1]

        # argmax keeps the first maximum, same as a strict-greater scan
        best_index = int(np.argmax(correlations))
        max_correlation = float(correlations[best_index])
        best_period = first_lag + best_index

        if max_correlation > self._correlation_threshold and best_period > 0:
            frequency = self._sample_rate / best_period
            logger.debug(
                f"Pitch {frequency:.2f}Hz (period={best_period}, corr={max_correlation:.3f})"
            )
            return FrequencyEstimate(frequency=frequency, correlation=max_correlation)

        logger.debug(f"No confident pitch (best corr={max_correlation:.3f})")
        return None

    @staticmethod
    def _windowed(samples: np.ndarray) -> np.ndarray:
        """Normalize to [-1, 1] and apply the raised-cosine window."""
        n = samples.size
        normalized = samples.astype(np.float64) / FULL_SCALE
        index = np.arange(n, dtype=np.float64)
        window = 0.5 * (1.0 - np.cos(2.0 * np.pi * index / (n - 1)))
        return normalized * window

    @staticmethod
    def _autocorrelation(signal: np.ndarray) -> np.ndarray:
        """Unnormalized autocorrelation for every non-negative lag.

        Element ``p`` is ``sum(signal[i] * signal[i + p])`` over ``i < n - p``.
        """
        n = signal.size
        return np.correlate(signal, signal, mode="full")[n - 1 :]
