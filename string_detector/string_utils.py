"""Helpers for presenting snapshots to a user."""

from .string_types import GuitarString, Snapshot

SILENT_VOLUME_PERCENT = 3


def volume_percent(volume: float) -> int:
    """Volume as a whole percentage (not clamped)."""
    return int(volume * 100)


def confidence_percent(confirmation_count: int, required_confirmations: int) -> int:
    """Confirmation count as a whole percentage of the required count.

    A lock taken over from the rolling history can carry more confirmations
    than required, so this may exceed 100.
    """
    if required_confirmations <= 0:
        return 0
    return (confirmation_count * 100) // required_confirmations


def format_volume(volume: float) -> str:
    """e.g. 'Volume: 42%', or 'Volume: Silent' at or below 3%."""
    percent = volume_percent(volume)
    if percent > SILENT_VOLUME_PERCENT:
        return f"Volume: {percent}%"
    return "Volume: Silent"


def format_status(snapshot: Snapshot) -> str:
    """One-line description of the locked string."""
    if snapshot.current_string is GuitarString.NONE:
        return "Play a guitar string clearly..."
    percent = confidence_percent(
        snapshot.confirmation_count, snapshot.required_confirmations
    )
    return f"Detected: {snapshot.current_string.symbol} string ({percent}% confidence)"


def colorize(text: str, string: GuitarString) -> str:
    """Wrap text in the 24-bit terminal colour of a string."""
    red, green, blue = string.color
    return f"\033[38;2;{red};{green};{blue}m{text}\033[0m"


def format_snapshot(snapshot: Snapshot, color: bool = False) -> str:
    """Status and volume together, with the full string name when locked.

    With ``color`` the string name is printed in that string's display colour.
    """
    line = f"{format_status(snapshot)} | {format_volume(snapshot.current_volume)}"
    string = snapshot.current_string
    if string is not GuitarString.NONE:
        name = colorize(string.display_name, string) if color else string.display_name
        line += f" | {name}"
    return line
