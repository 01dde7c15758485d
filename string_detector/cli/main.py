"""Main entry point for the string detector CLI."""

import argparse
import sys
import time
from collections import Counter
from typing import List, Optional

from ..logger import get_logger
from ..logging_config import setup_logging
from ..core.config import ConfigManager
from ..core.errors import DeviceUnavailableError
from ..core.factory import ComponentFactory
from ..string_types import GuitarString, Snapshot
from ..string_utils import format_snapshot

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Guitar String Detector - stable real-time string identification"
    )
    parser.add_argument(
        "--config-dir",
        default=None,
        help="Directory holding the JSON configuration (default: ~/.config/guitar_string_detector)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    listen_parser = subparsers.add_parser(
        "listen", help="Detect strings from the sound card"
    )
    listen_parser.add_argument(
        "--device", type=int, default=None, help="Audio input device ID"
    )
    listen_parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until 'q' or Ctrl-C)",
    )
    listen_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between processing cycles (default: from config, 0.1)",
    )

    analyze_parser = subparsers.add_parser(
        "analyze", help="Run a recorded audio file through the detector"
    )
    analyze_parser.add_argument("file", help="Path to a WAV (or other soundfile) file")
    analyze_parser.add_argument(
        "--gain", type=float, default=1.0, help="Gain to apply to the recording"
    )

    subparsers.add_parser("devices", help="List audio input devices")
    return parser


def wait_until_stopped(service, poll: float = 0.5) -> None:
    """Block until the service stops (Ctrl-C raises KeyboardInterrupt)."""
    while service.is_running():
        time.sleep(poll)


def run_listen(factory: ComponentFactory, args: argparse.Namespace) -> int:
    """Live detection until the duration elapses or the user quits."""
    color = sys.stdout.isatty()
    overrides = {}
    if args.device is not None:
        overrides["device_id"] = args.device
    service_overrides = {}
    if args.interval is not None:
        service_overrides["cycle_interval"] = args.interval

    def on_lock_changed(previous: GuitarString, current: GuitarString) -> None:
        print(format_snapshot(service.get_snapshot(), color=color))

    try:
        service = factory.create_service(
            factory.create_frame_source(**overrides), **service_overrides
        )
        service.events.on_lock_changed(on_lock_changed)
        service.start()
    except DeviceUnavailableError as e:
        print(f"Microphone error: {e}", file=sys.stderr)
        return 1

    print("Listening... Play a guitar string")
    try:
        if args.duration is not None:
            time.sleep(args.duration)
        else:
            print("Type 'r' + Enter to reset detection, 'q' + Enter to quit")
            quit_requested = False
            for line in sys.stdin:
                command = line.strip().lower()
                if command == "q":
                    quit_requested = True
                    break
                if command == "r":
                    service.reset()
                    print("Detection reset - play a string")
                else:
                    print(format_snapshot(service.get_snapshot(), color=color))
            if not quit_requested:
                print("Input closed; listening until Ctrl-C")
                wait_until_stopped(service)
    except KeyboardInterrupt:
        print("\nStopped by user")
    finally:
        service.stop()
        print("Stopped listening")
    return 0


def run_analyze(factory: ComponentFactory, args: argparse.Namespace) -> int:
    """Replay a file frame by frame and print every lock change."""
    try:
        source = factory.create_frame_source("wav", file_path=args.file, gain=args.gain)
        source.open()
    except DeviceUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    color = sys.stdout.isatty()
    pipeline = factory.create_pipeline(sample_rate=source.sample_rate)
    frame_seconds = source.frame_size / source.sample_rate
    frames_per_string: Counter = Counter()
    last: Optional[Snapshot] = None
    total = 0

    try:
        for index, frame in enumerate(source.iter_frames()):
            snapshot = pipeline.process(frame, timestamp=index * frame_seconds)
            frames_per_string[snapshot.current_string] += 1
            if last is None or snapshot.current_string != last.current_string:
                print(f"[{snapshot.timestamp:6.2f}s] {format_snapshot(snapshot, color=color)}")
            last = snapshot
            total += 1
    finally:
        source.close()

    print(f"\nAnalyzed {total} frames ({total * frame_seconds:.1f}s)")
    # Low E first, frames with no string last
    for string in sorted(frames_per_string, key=lambda s: (s.is_none, -s.string_number)):
        count = frames_per_string[string]
        label = "no string" if string.is_none else string.display_name
        print(f"  {label}: {count} frames")
    return 0


def run_devices() -> int:
    try:
        from ..audio.audio_input import default_input_device, list_input_devices
    except OSError as e:
        print(f"Microphone error: audio backend unavailable ({e})", file=sys.stderr)
        return 1

    default = default_input_device()
    print("Available input devices:")
    print("-" * 70)
    for device in list_input_devices():
        marker = "*" if device["id"] == default else " "
        print(
            f"{marker} Device {device['id']}: {device['name']} "
            f"(inputs: {device['max_input_channels']}, "
            f"default rate: {device['default_samplerate']:.0f} Hz)"
        )
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging("DEBUG" if parsed_args.debug else None)

    if parsed_args.command is None:
        parser.print_help()
        return 1

    if parsed_args.command == "devices":
        return run_devices()

    factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
    if parsed_args.command == "listen":
        return run_listen(factory, parsed_args)
    if parsed_args.command == "analyze":
        return run_analyze(factory, parsed_args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
