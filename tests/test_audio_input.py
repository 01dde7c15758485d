"""SoundDeviceFrameSource against a stand-in sounddevice module (no PortAudio needed)."""

import importlib
import sys
import types
import unittest
from unittest import mock

import numpy as np

from string_detector.core.errors import DeviceUnavailableError, FrameReadError


class FakePortAudioError(Exception):
    pass


class FakeInputStream:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.started = False
        self.closed = False
        self.fail_read = False
        FakeInputStream.instances.append(self)

    def start(self):
        self.started = True

    def read(self, frames):
        if self.fail_read:
            raise FakePortAudioError("Input overflowed")
        data = np.zeros((frames, self.kwargs["channels"]), dtype=np.int16)
        data[:, 0] = 7
        data[:, 1:] = -7
        return data, False

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True


def make_fake_sounddevice(refuse_settings=False):
    fake = types.ModuleType("sounddevice")
    fake.PortAudioError = FakePortAudioError
    fake.InputStream = FakeInputStream

    def check_input_settings(**kwargs):
        if refuse_settings:
            raise FakePortAudioError("Invalid device")

    fake.check_input_settings = check_input_settings
    fake.query_devices = lambda: [
        {"name": "Speakers", "max_input_channels": 0, "default_samplerate": 48000.0},
        {"name": "USB Guitar Adapter", "max_input_channels": 1, "default_samplerate": 44100.0},
    ]
    fake.default = types.SimpleNamespace(device=[1, 0])
    return fake


def load_audio_input(fake):
    with mock.patch.dict(sys.modules, {"sounddevice": fake}):
        sys.modules.pop("string_detector.audio.audio_input", None)
        return importlib.import_module("string_detector.audio.audio_input")


class TestSoundDeviceFrameSource(unittest.TestCase):
    def setUp(self):
        FakeInputStream.instances = []

    def test_open_read_close(self):
        module = load_audio_input(make_fake_sounddevice())
        source = module.SoundDeviceFrameSource(device_id=1, channels=2)

        source.open()
        self.assertTrue(source.is_open)
        stream = FakeInputStream.instances[0]
        self.assertEqual(stream.kwargs["dtype"], "int16")
        self.assertEqual(stream.kwargs["blocksize"], 4096)
        self.assertEqual(stream.kwargs["samplerate"], 44100)
        self.assertTrue(stream.started)

        frame = np.frombuffer(source.read_frame(), dtype="<i2")
        self.assertEqual(len(frame), 4096)
        self.assertTrue(np.all(frame == 7))

        source.close()
        self.assertFalse(source.is_open)
        self.assertTrue(stream.closed)

    def test_unavailable_device(self):
        module = load_audio_input(make_fake_sounddevice(refuse_settings=True))
        source = module.SoundDeviceFrameSource(device_id=5)
        with self.assertRaises(DeviceUnavailableError):
            source.open()
        self.assertFalse(source.is_open)

    def test_read_failure(self):
        module = load_audio_input(make_fake_sounddevice())
        source = module.SoundDeviceFrameSource()
        with self.assertRaises(FrameReadError):
            source.read_frame()

        source.open()
        FakeInputStream.instances[0].fail_read = True
        with self.assertRaises(FrameReadError):
            source.read_frame()
        source.close()

    def test_list_input_devices(self):
        module = load_audio_input(make_fake_sounddevice())
        devices = module.list_input_devices()
        self.assertEqual([d["id"] for d in devices], [1])
        self.assertEqual(devices[0]["name"], "USB Guitar Adapter")
        self.assertEqual(module.default_input_device(), 1)


if __name__ == "__main__":
    unittest.main()
