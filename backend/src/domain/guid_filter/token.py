"""Correlation token extraction from email subjects.

Ping emails carry their token as the last word of the subject, e.g.
``"Delivery check guid: 5f0c1a"``. Anything after the token means the
subject was not produced by the ping sender and is not matched.
"""

import re
from typing import Optional, Pattern

GUID_MARKER = "guid:"

# Token is the final non-whitespace run; trailing whitespace is allowed.
GUID_PATTERN: Pattern[str] = re.compile(re.escape(GUID_MARKER) + r"\s*?(\S+)\s*?\Z")


def extract_correlation_token(
    subject: Optional[str],
    pattern: Pattern[str] = GUID_PATTERN,
) -> Optional[str]:
    """Extract the correlation token from a subject line.

    Args:
        subject: Decoded subject string (may be None)
        pattern: Compiled pattern with the token in group 1

    Returns:
        The token exactly as captured, or None if the marker is absent or
        not followed by a trailing token

    Examples:
        >>> extract_correlation_token("Re: shipment guid: abc123")
        'abc123'
        >>> extract_correlation_token("guid:abc123 extra") is None
        True
    """
    if not subject:
        return None

    match = pattern.search(subject)
    if match is None:
        return None
    return match.group(1)
