"""Base SQLAlchemy declarative base and shared naming helpers"""

import re

from sqlalchemy.orm import declarative_base

# Table and column names taken from configuration must be plain identifiers.
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(value: str, what: str = "identifier") -> str:
    """Ensure a configured table/column name is a plain SQL identifier.

    Raises:
        ValueError: If the name is empty or contains other characters
    """
    if not value or not IDENTIFIER_PATTERN.match(value):
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


Base = declarative_base()
