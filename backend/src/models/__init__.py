"""SQLAlchemy models for MailProbe"""

from .base import Base, validate_identifier
from .correlation_record import build_correlation_table, TOKEN_COLUMN, SEEN_COLUMN
from .stored_mail import StoredMail

__all__ = [
    "Base",
    "validate_identifier",
    "build_correlation_table",
    "TOKEN_COLUMN",
    "SEEN_COLUMN",
    "StoredMail",
]
