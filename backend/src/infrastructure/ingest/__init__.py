"""SMTP ingest - aiosmtpd handler and MIME header parsing."""

from .mime_parser import EmailMetadata, extract_metadata, parse_mime_message
from .smtp_handler import MailProbeSMTPHandler

__all__ = [
    "EmailMetadata",
    "extract_metadata",
    "parse_mime_message",
    "MailProbeSMTPHandler",
]
