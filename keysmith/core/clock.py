"""Clock capability for time-based claims."""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], int]


def system_clock() -> int:
    """Current Unix time in whole seconds."""
    return int(datetime.now(UTC).timestamp())


def fixed_clock(timestamp: int) -> Clock:
    """Return a clock frozen at ``timestamp``."""

    def _now() -> int:
        return timestamp

    return _now
