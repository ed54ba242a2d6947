"""Header/body splitting of raw RFC 5322 messages.

The body is taken from the standard mail parser, the header block is cut
from the raw text independently so it keeps its original folding and
ordering byte for byte.
"""

import re
from email import errors as email_errors
from email.parser import HeaderParser
from email.policy import compat32
from typing import Pattern

from .errors import MessageSplitError
from .models import MessageParts

# Shortest prefix up to the first blank line; CRLF and LF both accepted.
HEADER_BLOCK_PATTERN: Pattern[str] = re.compile(r"\A(.+?)\r?\n\r?\n", re.DOTALL)

_BLANK_LINE_PATTERN = re.compile(r"(?:\A|\n)\r?\n")

_STRUCTURAL_DEFECTS = (
    email_errors.MissingHeaderBodySeparatorDefect,
    email_errors.FirstHeaderLineIsContinuationDefect,
)


def extract_header_block(raw_message: str, pattern: Pattern[str] = HEADER_BLOCK_PATTERN) -> str:
    """Return the text before the first double line break, or '' if there is none."""
    match = pattern.match(raw_message or "")
    if match is None:
        return ""
    return match.group(1)


def extract_body(raw_message: str) -> str:
    """Parse the message and return its body as raw text.

    Raises:
        MessageSplitError: If the header block is not terminated by a blank
            line or contains a line that is not a header
    """
    raw_message = raw_message or ""

    if not _BLANK_LINE_PATTERN.search(raw_message):
        raise MessageSplitError("Message has no blank line after the header block")

    msg = HeaderParser(policy=compat32).parsestr(raw_message)
    for defect in msg.defects:
        if isinstance(defect, _STRUCTURAL_DEFECTS):
            raise MessageSplitError(f"Malformed message header: {type(defect).__name__}")

    payload = msg.get_payload()
    return payload if isinstance(payload, str) else ""


def split_message(raw_message: str) -> MessageParts:
    """Split a raw message into its header block and body.

    Header and body are extracted independently: a missing header block
    yields an empty header without preventing body extraction.

    Args:
        raw_message: Full message text as received

    Returns:
        MessageParts with header (without the separating blank line) and body

    Raises:
        MessageSplitError: If the message cannot be parsed. ``error.parts``
            holds the header that could be extracted and an empty body.

    Examples:
        >>> split_message("A: 1\\nB: 2\\n\\nHello")
        MessageParts(header='A: 1\\nB: 2', body='Hello')
    """
    header = extract_header_block(raw_message)

    try:
        body = extract_body(raw_message)
    except MessageSplitError as e:
        e.parts = MessageParts(header=header, body="")
        raise

    return MessageParts(header=header, body=body)
