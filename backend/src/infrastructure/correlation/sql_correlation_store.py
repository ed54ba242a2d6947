"""SQL correlation store - SQLAlchemy adapter for CorrelationStorePort.

Reads and updates ping records in the configured table. Statements are
built with SQLAlchemy Core, so values are always bound parameters and the
configured identifiers are validated and quoted by the dialect.
"""

import logging
from typing import Optional

from sqlalchemy import and_, literal_column, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from domain.guid_filter.errors import CorrelationLookupError, CorrelationUpdateError
from domain.guid_filter.models import CorrelationRecord, DeliveryUpdate
from domain.guid_filter.ports import CorrelationStorePort
from models.correlation_record import build_correlation_table, TOKEN_COLUMN

logger = logging.getLogger(__name__)


class SQLCorrelationStore(CorrelationStorePort):
    """Correlation store backed by a relational table.

    Issues at most one SELECT per lookup and one UPDATE per delivery, each
    on its own pooled connection. Nothing is cached between calls.

    Example:
        store = SQLCorrelationStore(engine, table_name="pings", lookup_field="guid")
        store.validate_access()
        record = store.find_unseen("5f0c1a")
    """

    def __init__(self, engine: Engine, table_name: str, lookup_field: str = TOKEN_COLUMN):
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine owning the connection pool
            table_name: Table holding ping records
            lookup_field: Column selected on lookup

        Raises:
            ValueError: If table_name or lookup_field is not a plain identifier
        """
        self.engine = engine
        self.table = build_correlation_table(table_name, lookup_field)
        self.lookup_field = lookup_field

    @property
    def table_name(self) -> str:
        return self.table.name

    def validate_access(self) -> None:
        """Run ``SELECT * FROM <table> LIMIT 1`` to check the table is readable.

        Raises:
            CorrelationLookupError: If the read fails
        """
        stmt = select(literal_column("*")).select_from(self.table).limit(1)
        try:
            with self.engine.connect() as conn:
                conn.execute(stmt).first()
        except SQLAlchemyError as e:
            raise CorrelationLookupError(
                f"Cannot select from table {self.table_name}: {e}"
            ) from e

        logger.info(f"Correlation table {self.table_name} is readable")

    def find_unseen(self, token: str) -> Optional[CorrelationRecord]:
        """Look up the unseen record for a token.

        Runs ``SELECT <lookup_field> FROM <table> WHERE guid = ? AND seen = 0``.

        Args:
            token: Correlation token

        Returns:
            CorrelationRecord or None if there is no unseen record

        Raises:
            CorrelationLookupError: On any database error
        """
        columns = self.table.c
        stmt = (
            select(columns[self.lookup_field])
            .where(and_(columns.guid == token, columns.seen == 0))
            .limit(1)
        )

        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            raise CorrelationLookupError(f"Could not lookup GUID {token}: {e}") from e

        if row is None:
            return None
        return CorrelationRecord(token=token, lookup_value=row[0])

    def record_delivery(self, delivery: DeliveryUpdate) -> int:
        """Store delivery data on the record and mark it seen.

        Runs ``UPDATE <table> SET time_taken=?, header=?, body=?,
        received_time=?, seen=1 WHERE guid=?`` in its own transaction.

        Args:
            delivery: Values to write

        Returns:
            Number of rows updated (0 if the record vanished meanwhile)

        Raises:
            CorrelationUpdateError: If the statement cannot be built or executed
        """
        try:
            columns = self.table.c
            stmt = (
                update(self.table)
                .where(columns.guid == delivery.token)
                .values(
                    time_taken=delivery.time_taken,
                    header=delivery.header,
                    body=delivery.body,
                    received_time=delivery.received_time,
                    seen=1,
                )
            )
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
        except SQLAlchemyError as e:
            raise CorrelationUpdateError(
                f"Could not update delay for GUID {delivery.token}: {e}"
            ) from e

        if result.rowcount == 0:
            logger.warning(f"Delivery update for GUID {delivery.token} matched no rows")
        return result.rowcount
