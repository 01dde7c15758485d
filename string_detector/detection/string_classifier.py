"""Map an estimated frequency to the nearest open guitar string."""

from typing import Iterable, Optional

from ..string_types import FREQUENCY_TOLERANCE, GUITAR_STRINGS, GuitarString


def classify_frequency(
    frequency: Optional[float],
    tolerance: float = FREQUENCY_TOLERANCE,
    strings: Iterable[GuitarString] = GUITAR_STRINGS,
) -> GuitarString:
    """Find the string whose open frequency is closest to ``frequency``.

    Strings are scanned in the order given (ascending pitch by default). A
    string replaces the current best only if its difference is strictly
    below both the tolerance and the best difference so far, so ties go to
    the lower string.

    Args:
        frequency: Detected fundamental in Hz, or None
        tolerance: Maximum allowed distance in Hz (exclusive)
        strings: Candidate strings

    Returns:
        The matching GuitarString, or GuitarString.NONE
    """
    if frequency is None or frequency <= 0:
        return GuitarString.NONE

    closest = GuitarString.NONE
    min_difference = float("inf")
    for string in strings:
        difference = abs(frequency - string.frequency)
        if difference < tolerance and difference < min_difference:
            min_difference = difference
            closest = string
    return closest


class StringClassifier:
    """Frequency classifier bound to a fixed tolerance."""

    def __init__(self, tolerance: float = FREQUENCY_TOLERANCE):
        if tolerance <= 0:
            raise ValueError("tolerance must be positive")
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def classify(self, frequency: Optional[float]) -> GuitarString:
        return classify_frequency(frequency, self._tolerance)
