"""Delivery delay calculation from transport-trace timestamps."""

from datetime import datetime
from typing import Iterable, List


def sort_timestamps(times: Iterable[datetime]) -> List[datetime]:
    """Return the timestamps ordered by instant, earliest first."""
    return sorted(times)


def calculate_delay(times: Iterable[datetime]) -> int:
    """Compute the delivery delay in whole seconds.

    The delay is the time between the earliest and the latest hop. With
    fewer than two timestamps there is nothing to measure and the delay is 0.

    Args:
        times: Timezone-aware timestamps in any order (may be empty)

    Returns:
        Seconds between earliest and latest instant, truncated

    Examples:
        >>> calculate_delay([])
        0
    """
    ordered = sort_timestamps(times or [])
    if len(ordered) < 2:
        return 0

    first = ordered[0]
    last = ordered[-1]
    return int((last - first).total_seconds())
