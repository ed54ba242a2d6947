"""Correlation record table - ping records awaiting their email.

A ping sender inserts one row per probe email with a fresh GUID and
``seen = 0``. When the email comes back through the SMTP pipeline the GUID
filter fills in the delivery data and flips ``seen`` to 1.

The table name and the lookup column are configurable, so the table is
described with SQLAlchemy Core instead of a declarative model.
"""

from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
    text,
)

from .base import validate_identifier

TOKEN_COLUMN = "guid"
SEEN_COLUMN = "seen"

# Columns the GUID filter writes once the ping arrived
DELIVERY_COLUMNS = ("time_taken", "header", "body", "received_time", SEEN_COLUMN)


def build_correlation_table(
    table_name: str,
    lookup_field: str = TOKEN_COLUMN,
    metadata: Optional[MetaData] = None,
) -> Table:
    """Describe the correlation table for the configured names.

    Args:
        table_name: Configured table name (GUID_FILTER_LOOKUP_TABLE)
        lookup_field: Configured column read on lookup (GUID_FILTER_LOOKUP_FIELD)
        metadata: MetaData to attach the table to (new one if omitted)

    Returns:
        Table: Usable both for queries and for ``metadata.create_all``

    Raises:
        ValueError: If a configured name is not a plain identifier
    """
    validate_identifier(table_name, "lookup table name")
    validate_identifier(lookup_field, "lookup field name")

    columns = [
        Column(TOKEN_COLUMN, String(255), primary_key=True),
        Column(SEEN_COLUMN, SmallInteger, nullable=False, server_default=text("0")),
        Column("time_taken", Integer, nullable=True),
        Column("header", Text, nullable=True),
        Column("body", Text, nullable=True),
        Column("received_time", DateTime(timezone=True), nullable=True),
    ]

    known = {column.name for column in columns}
    if lookup_field not in known:
        columns.append(Column(lookup_field, Text, nullable=True))

    return Table(table_name, metadata if metadata is not None else MetaData(), *columns)
