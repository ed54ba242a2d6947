"""Timestamp parsing for transport-trace (Received) headers.

Every relay prepends a ``Received:`` header whose date part follows the
RFC 2822 layout, e.g.::

    Received: from mx.example.com (mx.example.com [192.0.2.10])
        by relay.example.net with ESMTP id 4Bc9; Mon, 2 Jan 2006 15:04:05 -0700

The surrounding text is free-form, so the date is located with a loose
pattern first and only the matched substring is handed to the date parser.
"""

import logging
import re
from datetime import datetime, timezone
from email.parser import HeaderParser
from email.policy import compat32
from email.utils import parsedate_to_datetime
from typing import List, Optional, Pattern

from .errors import TraceTimeParseError

logger = logging.getLogger(__name__)

TRACE_HEADER = "Received"

# weekday, day month year HH:MM:SS zone
TRACE_TIME_PATTERN: Pattern[str] = re.compile(
    r"[A-Za-z_]{3}, \d+ [A-Za-z_]+ \d+ \d+:\d+:\d+ [-+]?\d+",
    re.ASCII,
)

_FOLD_PATTERN = re.compile(r"[ \t]*\r?\n[ \t]+")


def unfold_header(value: str) -> str:
    """Join folded header continuation lines with a single space."""
    return _FOLD_PATTERN.sub(" ", value)


def parse_trace_time(
    header_value: str,
    pattern: Pattern[str] = TRACE_TIME_PATTERN,
) -> datetime:
    """Parse the timestamp carried by one Received header value.

    When the value contains several date-like substrings the last one wins,
    since the stamp follows the ``;`` at the end of the header.

    Args:
        header_value: Raw header value (folded or unfolded)
        pattern: Compiled date locator pattern

    Returns:
        Timezone-aware datetime. A ``-0000`` zone is read as UTC.

    Raises:
        TraceTimeParseError: If no date is found or the match is not a valid date
    """
    value = unfold_header(header_value or "")

    candidate: Optional[str] = None
    for match in pattern.finditer(value):
        candidate = match.group(0)

    if candidate is None:
        raise TraceTimeParseError("Could not find RFC 2822 time", header_value)

    try:
        parsed = parsedate_to_datetime(candidate)
    except (TypeError, ValueError, IndexError, OverflowError) as e:
        raise TraceTimeParseError(
            f"Invalid RFC 2822 time '{candidate}': {e}", header_value
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def received_header_values(raw_message: str) -> List[str]:
    """Return every Received header value of a raw message, in header order."""
    msg = HeaderParser(policy=compat32).parsestr(raw_message or "")
    return [str(value) for value in msg.get_all(TRACE_HEADER, [])]


def extract_received_times(raw_message: str) -> List[datetime]:
    """Parse all Received timestamps of a message, skipping unparseable ones."""
    times: List[datetime] = []
    for value in received_header_values(raw_message):
        try:
            times.append(parse_trace_time(value))
        except TraceTimeParseError as e:
            logger.debug(f"Skipping Received header: {e}")
            continue
    return times
