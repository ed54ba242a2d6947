"""Mail store processor - persists accepted messages.

Last stage of the default pipeline. Messages annotated with ``ignore`` by an
earlier stage are acknowledged but not stored.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine

from database import create_session_factory, session_scope
from domain.guid_filter.splitter import extract_header_block
from domain.pipeline.models import Envelope, Result, SelectTask, MESSAGE_ID_KEY
from domain.pipeline.errors import StageInitializationError
from domain.pipeline.ports import ProcessorPort
from models.stored_mail import StoredMail
from observability.metrics import messages_stored_total

logger = logging.getLogger(__name__)


class MailStoreProcessor(ProcessorPort):
    """Store saved mail in the ``mail`` table unless it was suppressed."""

    name = "MailStore"

    def __init__(self, engine: Engine, create_table: bool = True):
        """Initialize the processor.

        Args:
            engine: Engine of the mail database
            create_table: Create the mail table on initialize if missing
        """
        self.engine = engine
        self.session_factory = create_session_factory(engine)
        self.create_table = create_table

    def initialize(self) -> None:
        if not self.create_table:
            return
        try:
            StoredMail.__table__.create(bind=self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise StageInitializationError(
                f"Cannot create mail table: {e}", stage_name=self.name
            ) from e

    def process(self, envelope: Envelope, task: SelectTask) -> Result:
        if task != SelectTask.SAVE_MAIL:
            return Result.accepted(envelope.queued_id)

        if envelope.ignored:
            logger.info(f"Not storing message {envelope.queued_id}, marked as ignored")
            messages_stored_total.labels(status="ignored").inc()
            return Result.accepted(envelope.queued_id)

        row = StoredMail(
            queued_id=envelope.queued_id,
            message_id=envelope.values.get(MESSAGE_ID_KEY),
            mail_from=envelope.mail_from,
            rcpt_to=", ".join(envelope.rcpt_tos),
            subject=envelope.subject,
            remote_ip=envelope.remote_ip,
            helo=envelope.helo,
            delivery_header=extract_header_block(envelope.data),
            data=envelope.data,
        )

        try:
            with session_scope(self.session_factory) as session:
                session.add(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store message {envelope.queued_id}: {e}")
            messages_stored_total.labels(status="error").inc()
            return Result.temporary_failure("Storage error")

        messages_stored_total.labels(status="stored").inc()
        logger.info(f"Stored message {envelope.queued_id}")
        return Result.accepted(envelope.queued_id)
