import unittest
from unittest import mock

import numpy as np

from string_detector.audio.pitch_estimator import PitchEstimator
from synth import sine_frame, silent_frame


class TestPitchEstimator(unittest.TestCase):
    def setUp(self):
        self.estimator = PitchEstimator()

    def test_lag_range(self):
        self.assertEqual(self.estimator.min_period, 110)  # 400 Hz
        self.assertEqual(self.estimator.max_period, 630)  # 70 Hz

    def test_a_string_sine(self):
        estimate = self.estimator.estimate(sine_frame(110.0))
        self.assertIsNotNone(estimate)
        self.assertAlmostEqual(estimate.frequency, 110.0, delta=2.0)
        self.assertGreater(estimate.correlation, 0.4)

    def test_open_string_sines(self):
        for frequency in (82.41, 146.83, 196.00, 246.94, 329.63):
            with self.subTest(frequency=frequency):
                estimate = self.estimator.estimate(sine_frame(frequency))
                self.assertIsNotNone(estimate)
                self.assertAlmostEqual(estimate.frequency, frequency, delta=2.0)

    def test_short_capture(self):
        # A partial read still holds several periods of 110 Hz
        estimate = self.estimator.estimate(sine_frame(110.0, size=3072))
        self.assertIsNotNone(estimate)
        self.assertAlmostEqual(estimate.frequency, 110.0, delta=2.0)

    def test_silence_has_no_pitch(self):
        self.assertIsNone(self.estimator.estimate(silent_frame()))

    def test_threshold_depends_on_loudness(self):
        # Same note, same periodicity: only the unnormalized energy differs
        quiet = self.estimator.estimate(sine_frame(110.0, amplitude=0.01))
        louder = self.estimator.estimate(sine_frame(110.0, amplitude=0.05))
        loud = self.estimator.estimate(sine_frame(110.0, amplitude=0.5))

        self.assertIsNone(quiet)
        self.assertIsNotNone(louder)
        self.assertIsNotNone(loud)
        self.assertGreater(loud.correlation, louder.correlation)
        self.assertAlmostEqual(louder.frequency, loud.frequency, delta=0.5)

    def test_short_frames_have_no_pitch(self):
        self.assertIsNone(self.estimator.estimate(sine_frame(110.0, size=200)))
        self.assertIsNone(self.estimator.estimate(sine_frame(110.0, size=1)))
        self.assertIsNone(self.estimator.estimate(b""))

    def test_accepts_raw_bytes(self):
        frame = sine_frame(146.83)
        estimate = self.estimator.estimate(frame.astype("<i2").tobytes())
        self.assertIsNotNone(estimate)
        self.assertAlmostEqual(estimate.frequency, 146.83, delta=2.0)

    def test_equal_peaks_pick_shortest_lag(self):
        correlations = np.zeros(4096)
        correlations[200] = correlations[400] = 5.0
        with mock.patch.object(PitchEstimator, "_autocorrelation", return_value=correlations):
            estimate = self.estimator.estimate(sine_frame(110.0))

        self.assertIsNotNone(estimate)
        self.assertAlmostEqual(estimate.frequency, 44100 / 200)
        self.assertEqual(estimate.correlation, 5.0)

    def test_invalid_configuration(self):
        with self.assertRaises(ValueError):
            PitchEstimator(sample_rate=0)
        with self.assertRaises(ValueError):
            PitchEstimator(min_frequency=400.0, max_frequency=70.0)


if __name__ == "__main__":
    unittest.main()
