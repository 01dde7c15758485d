"""Listening session controller: frame source lifecycle, processing loop and snapshots."""

from __future__ import annotations
import queue
import threading
from enum import Enum, auto
from typing import Optional

from ..logger import get_logger
from ..core.errors import FrameReadError
from ..core.events import DetectionEvents
from ..core.interfaces import IFrameSource, IStringDetectionService
from ..detection.frame_pipeline import FramePipeline
from ..string_types import Snapshot

logger = get_logger(__name__)


class ServiceCommand(Enum):
    """Commands accepted by the service."""

    START = auto()
    STOP = auto()
    RESET = auto()


class StringDetectionService(IStringDetectionService):
    """Runs read -> analyze -> publish once per ``cycle_interval`` on a worker thread.

    The service is the only external entry point: it owns the frame source and
    the pipeline, and exposes the latest Snapshot through get_snapshot(). A
    snapshot is an immutable value replaced wholesale each cycle, so readers
    on other threads always see a consistent volume/string/count triple.
    """

    def __init__(
        self,
        frame_source: IFrameSource,
        pipeline: Optional[FramePipeline] = None,
        cycle_interval: float = 0.1,
        stop_timeout: float = 2.0,
    ) -> None:
        """Initialize the service.

        Args:
            frame_source: Blocking source of audio frames
            pipeline: Frame pipeline, or None to create a default one
            cycle_interval: Seconds to wait between cycles
            stop_timeout: Seconds stop() waits for a blocked read to return
        """
        if cycle_interval < 0:
            raise ValueError("cycle_interval must not be negative")

        self._frame_source = frame_source
        self._pipeline = pipeline or FramePipeline()
        self._cycle_interval = cycle_interval
        self._stop_timeout = stop_timeout
        self.events = DetectionEvents()

        self._commands: "queue.Queue[ServiceCommand]" = queue.Queue()
        self._snapshot_lock = threading.Lock()
        # Guards the pipeline; never held across a blocking read
        self._state_lock = threading.RLock()
        self._snapshot = Snapshot(
            required_confirmations=self._pipeline.tracker.required_confirmations
        )
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def send(self, command: ServiceCommand) -> None:
        """Dispatch a command."""
        if command is ServiceCommand.START:
            self.start()
        elif command is ServiceCommand.STOP:
            self.stop()
        elif command is ServiceCommand.RESET:
            self.reset()
        else:
            raise ValueError(f"Unknown command: {command}")

    def start(self) -> None:
        """Open the frame source and start the processing loop.

        Raises:
            DeviceUnavailableError: If the frame source cannot be opened. The
                loop is not started.
        """
        if self._running:
            logger.warning("String detection already running")
            return

        self._frame_source.open()

        # Each run gets its own event so a worker left over from a previous
        # run stays stopped
        self._stop_event = threading.Event()
        self._running = True
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="string-detection",
            daemon=True,
        )
        self._thread.start()
        logger.info("String detection started")

    def stop(self) -> None:
        """Stop the processing loop and close the frame source.

        Commands still queued (a pending reset) are applied before returning.
        """
        if not self._running:
            return

        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self._stop_timeout, self._cycle_interval * 5))
            if thread.is_alive():
                logger.warning(
                    "Worker still blocked in a read; it will exit when the read returns"
                )
        self._thread = None
        self._running = False
        self._frame_source.close()

        with self._state_lock:
            self._drain_commands()
        logger.info("String detection stopped")

    def reset(self) -> None:
        """Clear the lock and history.

        While running, the reset is applied at the start of the next cycle
        (or by stop(), whichever comes first); otherwise it is applied
        immediately. Either way the next published snapshot is the cleared one.
        """
        if self._running:
            self._commands.put(ServiceCommand.RESET)
        else:
            with self._state_lock:
                self._apply_reset()

    def is_running(self) -> bool:
        return self._running

    @property
    def pipeline(self) -> FramePipeline:
        return self._pipeline

    @property
    def cycle_interval(self) -> float:
        return self._cycle_interval

    def get_snapshot(self) -> Snapshot:
        with self._snapshot_lock:
            return self._snapshot

    def process_cycle(self) -> Optional[Snapshot]:
        """Run one read-process-publish cycle on the calling thread.

        Returns:
            The published Snapshot, or None if the read failed and the
            cycle was skipped
        """
        return self._cycle(None)

    def _cycle(self, stop_event: Optional[threading.Event]) -> Optional[Snapshot]:
        with self._state_lock:
            if self._drain_commands():
                return self.get_snapshot()

        try:
            frame = self._frame_source.read_frame()
        except FrameReadError as e:
            logger.warning(f"Skipping cycle after read failure: {e}")
            self.events.emit_read_error(e)
            return None

        with self._state_lock:
            if stop_event is not None and stop_event.is_set():
                logger.debug("Discarding frame read after stop")
                return None
            snapshot = self._pipeline.process(frame)
            self._publish(snapshot)
        return snapshot

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self._cycle(stop_event)
            except Exception:
                logger.exception("Unexpected error in processing cycle")
            stop_event.wait(self._cycle_interval)

    def _drain_commands(self) -> bool:
        """Apply queued commands. Returns True if a reset was applied."""
        reset = False
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return reset
            if command is ServiceCommand.RESET:
                self._apply_reset()
                reset = True

    def _apply_reset(self) -> None:
        self._publish(self._pipeline.reset())
        logger.info("Detection reset")

    def _publish(self, snapshot: Snapshot) -> None:
        with self._snapshot_lock:
            previous = self._snapshot
            self._snapshot = snapshot

        if previous.current_string != snapshot.current_string:
            self.events.emit_lock_changed(previous.current_string, snapshot.current_string)
        self.events.emit_snapshot(snapshot)
