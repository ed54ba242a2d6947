"""MIME parser for inbound mail headers.

Parses raw messages with the standard library email package and extracts
the metadata the pipeline stages need. RFC 2047 encoded words in headers
are decoded by the ``email.policy.default`` policy.
"""

import email
import email.policy
import hashlib
import logging
from dataclasses import dataclass
from email.message import Message
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class EmailMetadata:
    """Extracted metadata from email message."""

    message_id: Optional[str]
    from_email: Optional[str]
    to_email: Optional[str]
    subject: Optional[str]
    date: Optional[str]


def parse_mime_message(raw_mime: Union[str, bytes]) -> Message:
    """Parse a raw message into an email.message.Message object.

    Args:
        raw_mime: Raw message as text or bytes

    Returns:
        email.Message: Parsed message

    Raises:
        ValueError: If MIME parsing fails
    """
    try:
        if isinstance(raw_mime, bytes):
            return email.message_from_bytes(raw_mime, policy=email.policy.default)
        return email.message_from_string(raw_mime, policy=email.policy.default)
    except Exception as e:
        logger.error(f"Failed to parse MIME message: {e}")
        raise ValueError(f"Invalid MIME message: {e}") from e


def _header(msg: Message, name: str) -> Optional[str]:
    value = msg.get(name)
    if value is None:
        return None
    return str(value)


def extract_metadata(msg: Message) -> EmailMetadata:
    """Extract email metadata from a parsed message.

    A synthetic Message-ID is generated when the header is missing so that
    stored mail can always be referenced.

    Args:
        msg: Parsed email message

    Returns:
        EmailMetadata: Extracted metadata
    """
    message_id = _header(msg, "Message-ID")
    if not message_id:
        message_id = generate_synthetic_message_id(
            _header(msg, "From") or "",
            _header(msg, "To") or "",
            _header(msg, "Subject") or "",
            _header(msg, "Date") or "",
        )
        logger.warning(f"Email missing Message-ID, generated synthetic: {message_id}")

    return EmailMetadata(
        message_id=message_id,
        from_email=_header(msg, "From"),
        to_email=_header(msg, "To"),
        subject=_header(msg, "Subject"),
        date=_header(msg, "Date"),
    )


def generate_synthetic_message_id(from_email: str, to_email: str, subject: str, date: str) -> str:
    """Generate a deterministic Message-ID for emails missing the header.

    Args:
        from_email: Sender email address
        to_email: Recipient email address
        subject: Email subject
        date: Email date header

    Returns:
        str: Synthetic Message-ID in RFC 5322 format
    """
    header_data = f"{from_email}{to_email}{subject}{date}".encode()
    header_hash = hashlib.sha256(header_data).hexdigest()[:16]
    return f"<synthetic-{header_hash}@mailprobe.generated>"
