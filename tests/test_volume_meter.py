import unittest

import numpy as np

from string_detector.audio.frames import frame_from_bytes
from string_detector.audio.volume_meter import calculate_volume
from synth import sine_frame, silent_frame


class TestVolumeMeter(unittest.TestCase):
    def test_silence_is_zero(self):
        self.assertEqual(calculate_volume(silent_frame()), 0.0)

    def test_constant_amplitude(self):
        frame = np.full(4096, 1000, dtype=np.int16)
        self.assertAlmostEqual(calculate_volume(frame), 1000 / 32768.0)

    def test_negative_constant_uses_absolute_value(self):
        frame = np.full(4096, -1000, dtype=np.int16)
        self.assertAlmostEqual(calculate_volume(frame), 1000 / 32768.0)

    def test_full_scale_negative_does_not_overflow(self):
        frame = np.full(4096, -32768, dtype=np.int16)
        self.assertAlmostEqual(calculate_volume(frame), 1.0)

    def test_mean_absolute_not_rms(self):
        # |sin| averages 2/pi of the peak; RMS would be 1/sqrt(2)
        volume = calculate_volume(sine_frame(110.0, amplitude=0.5, size=44100))
        self.assertAlmostEqual(volume, 0.5 * 2 / np.pi, places=2)

    def test_empty_frame(self):
        self.assertEqual(calculate_volume(np.array([], dtype=np.int16)), 0.0)
        self.assertEqual(calculate_volume(b""), 0.0)

    def test_bytes_are_little_endian(self):
        # -2 encoded as 0xfffe
        self.assertAlmostEqual(calculate_volume(b"\xfe\xff"), 2 / 32768.0)

    def test_odd_length_buffer_drops_trailing_byte(self):
        self.assertEqual(len(frame_from_bytes(b"\x10\x00\x10")), 1)
        self.assertAlmostEqual(calculate_volume(b"\x10\x00\x10"), 16 / 32768.0)


if __name__ == "__main__":
    unittest.main()
