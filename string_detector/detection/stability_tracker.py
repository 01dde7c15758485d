"""Debouncing of raw per-frame string guesses into a locked string."""

from ..logger import get_logger
from ..string_types import (
    HISTORY_SIZE,
    REQUIRED_CONFIRMATIONS,
    GuitarString,
    TrackerState,
)

logger = get_logger(__name__)

INITIAL_STATE = TrackerState()


def transition(
    state: TrackerState,
    detection: GuitarString,
    required_confirmations: int = REQUIRED_CONFIRMATIONS,
    history_size: int = HISTORY_SIZE,
) -> TrackerState:
    """Advance the lock state by one raw detection.

    - Same string as the lock: confirmation count climbs, capped at
      ``required_confirmations``. NONE while unlocked changes nothing.
    - A different string: it takes the lock only once it fills at least
      ``required_confirmations`` of the rolling history, and the count is
      then set to that match count (which may exceed the cap).
    - NONE while locked: the count decays by one; the lock is released at 0.

    Args:
        state: Current state (never mutated)
        detection: Raw classification for this frame
        required_confirmations: Evidence needed to lock
        history_size: Length of the rolling history

    Returns:
        The next TrackerState
    """
    history = (state.history + (detection,))[-history_size:]
    locked = state.locked
    count = state.confirmation_count

    if detection == locked:
        # Silence while unlocked leaves the count alone
        if locked is not GuitarString.NONE:
            count = min(count + 1, required_confirmations)
    elif detection is not GuitarString.NONE:
        match_count = history.count(detection)
        if match_count >= required_confirmations:
            locked = detection
            count = match_count
    else:
        count = max(0, count - 1)
        if count == 0:
            locked = GuitarString.NONE

    return TrackerState(locked=locked, confirmation_count=count, history=history)


class StabilityTracker:
    """Holds the current TrackerState for a listening session."""

    def __init__(
        self,
        required_confirmations: int = REQUIRED_CONFIRMATIONS,
        history_size: int = HISTORY_SIZE,
    ):
        if required_confirmations < 1:
            raise ValueError("required_confirmations must be at least 1")
        if history_size < required_confirmations:
            raise ValueError("history_size must be at least required_confirmations")

        self._required_confirmations = required_confirmations
        self._history_size = history_size
        self._state = INITIAL_STATE

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def current_string(self) -> GuitarString:
        return self._state.locked

    @property
    def required_confirmations(self) -> int:
        return self._required_confirmations

    def update(self, detection: GuitarString) -> TrackerState:
        """Feed one raw detection and return the new state."""
        previous = self._state
        self._state = transition(
            previous,
            detection,
            required_confirmations=self._required_confirmations,
            history_size=self._history_size,
        )

        if self._state.locked != previous.locked:
            if self._state.locked is GuitarString.NONE:
                logger.info(f"Lost lock on {previous.locked.display_name}")
            else:
                logger.info(
                    f"Locked on {self._state.locked.display_name} "
                    f"({self._state.confirmation_count} of last {len(self._state.history)} frames)"
                )
        return self._state

    def reset(self) -> None:
        """Forget the lock and the history."""
        self._state = INITIAL_STATE
        logger.debug("Stability tracker reset")
