import importlib
import io

import numpy as np
import pytest
import soundfile as sf

from string_detector import logging_config
from string_detector.cli.main import main
from string_detector.core.factory import ComponentFactory
from fakes import FakeFrameSource
from synth import sine_frame, silent_frame

cli_main = importlib.import_module("string_detector.cli.main")


@pytest.fixture(autouse=True)
def fresh_console_handler(monkeypatch):
    # The shared handler binds sys.stdout, which capsys swaps per test
    monkeypatch.setattr(logging_config, "_console_handler", None)


@pytest.fixture
def recording(tmp_path):
    # 1s of silence, ~2s of open A, 1s of silence
    audio = np.concatenate(
        [silent_frame(44100), sine_frame(110.0, size=88200), silent_frame(44100)]
    )
    path = tmp_path / "open_a.wav"
    sf.write(str(path), audio, 44100, subtype="PCM_16")
    return str(path)


def test_analyze_reports_lock_changes(recording, tmp_path, capsys):
    exit_code = main(["--config-dir", str(tmp_path / "config"), "analyze", recording])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "Detected: A string" in out
    assert "A (5th)" in out
    assert "Analyzed 44 frames" in out


def test_analyze_missing_file(tmp_path, capsys):
    exit_code = main(
        ["--config-dir", str(tmp_path / "config"), "analyze", str(tmp_path / "nope.wav")]
    )
    assert exit_code == 1
    assert "Error" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


@pytest.fixture
def fake_microphone(monkeypatch):
    source = FakeFrameSource([silent_frame()], repeat=True)
    monkeypatch.setattr(
        ComponentFactory, "create_frame_source", lambda self, *args, **kwargs: source
    )
    return source


def test_listen_keeps_running_when_stdin_closes(fake_microphone, tmp_path, monkeypatch, capsys):
    waited = []

    def interrupted(service, poll=0.5):
        waited.append(service.is_running())
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_main, "wait_until_stopped", interrupted)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    exit_code = main(["--config-dir", str(tmp_path / "config"), "listen", "--interval", "0.01"])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert waited == [True]
    assert "Input closed; listening until Ctrl-C" in out
    assert "Stopped by user" in out
    assert fake_microphone.close_calls == 1


def test_listen_quit_command(fake_microphone, tmp_path, monkeypatch, capsys):
    def never(service, poll=0.5):
        raise AssertionError("should not wait after 'q'")

    monkeypatch.setattr(cli_main, "wait_until_stopped", never)
    monkeypatch.setattr("sys.stdin", io.StringIO("r\nq\n"))

    exit_code = main(["--config-dir", str(tmp_path / "config"), "listen", "--interval", "0.01"])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "Detection reset - play a string" in out
    assert "Input closed" not in out
    assert "Stopped listening" in out


def test_analyze_summary_orders_strings_low_to_high(tmp_path, capsys):
    audio = np.concatenate(
        [sine_frame(196.0, size=44100), sine_frame(82.41, size=44100), silent_frame(44100)]
    )
    path = tmp_path / "g_then_low_e.wav"
    sf.write(str(path), audio, 44100, subtype="PCM_16")

    assert main(["--config-dir", str(tmp_path / "config"), "analyze", str(path)]) == 0
    out = capsys.readouterr().out
    summary = out.split("Analyzed", 1)[1]

    assert summary.index("Low E (6th)") < summary.index("G (3rd)") < summary.index("no string")
