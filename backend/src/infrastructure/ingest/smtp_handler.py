"""SMTP Handler for MailProbe email ingestion.

Implements an aiosmtpd handler that runs every received message through the
save-mail pipeline. The pipeline is synchronous, so it runs in a worker
thread to keep the SMTP event loop responsive.
"""

import asyncio
import logging
from typing import Optional

from aiosmtpd.smtp import Envelope as SMTPEnvelope, Session, SMTP

from domain.pipeline.models import Envelope, Result, SelectTask
from infrastructure.pipeline.pipeline import Pipeline
from observability.envelope_id import generate_envelope_id, set_envelope_id

logger = logging.getLogger(__name__)


def decode_content(content: bytes) -> str:
    """Decode message bytes as UTF-8, falling back to Latin-1.

    Latin-1 maps every byte to one code point, so 8-bit messages in other
    charsets can be re-encoded to their original bytes.
    """
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Message is not valid UTF-8, decoding as Latin-1")
        return content.decode("latin-1")


class MailProbeSMTPHandler:
    """SMTP handler feeding received mail into the pipeline.

    Email processing:
    1. RCPT: run the pipeline with VALIDATE_RCPT for each recipient
    2. DATA: build a pipeline Envelope and run it with SAVE_MAIL
    3. Reply with the pipeline result ('250 OK: queued as <id>' on success)

    Suppressed messages (no GUID, unknown GUID) are still answered with 250
    so senders do not retry them.
    """

    def __init__(self, pipeline: Pipeline):
        """Initialize SMTP handler.

        Args:
            pipeline: Initialized pipeline to run messages through
        """
        self.pipeline = pipeline

    @staticmethod
    def build_envelope(session: Session, envelope: SMTPEnvelope, queued_id: str) -> Envelope:
        """Convert an aiosmtpd envelope into a pipeline Envelope."""
        content = envelope.content
        if isinstance(content, bytes):
            content = decode_content(content)

        remote_ip = ""
        if session is not None and session.peer:
            peer = session.peer
            remote_ip = peer[0] if isinstance(peer, (tuple, list)) else str(peer)

        return Envelope(
            data=content or "",
            mail_from=envelope.mail_from or "",
            rcpt_tos=list(envelope.rcpt_tos or []),
            remote_ip=remote_ip,
            helo=(session.host_name or "") if session is not None else "",
            queued_id=queued_id,
        )

    async def _run(self, envelope: Envelope, task: SelectTask) -> Result:
        return await asyncio.to_thread(self.pipeline.process, envelope, task)

    async def handle_RCPT(
        self,
        server: SMTP,
        session: Session,
        envelope: SMTPEnvelope,
        address: str,
        rcpt_options: list,
    ) -> str:
        """Validate a recipient through the pipeline before accepting it."""
        probe = Envelope(
            data="",
            mail_from=envelope.mail_from or "",
            rcpt_tos=[address],
            queued_id=generate_envelope_id(),
        )

        try:
            result = await self._run(probe, SelectTask.VALIDATE_RCPT)
        except Exception as e:
            logger.error(f"Recipient validation failed for {address}: {e}", exc_info=True)
            return '451 Temporary server error'

        if not result.ok:
            logger.warning(f"Recipient {address} rejected: {result.reply()}")
            return result.reply()

        envelope.rcpt_tos.append(address)
        return '250 OK'

    async def handle_DATA(
        self,
        server: SMTP,
        session: Session,
        envelope: SMTPEnvelope,
    ) -> str:
        """Handle email DATA command (main SMTP handler entry point).

        Args:
            server: SMTP server instance
            session: SMTP session
            envelope: Email envelope (content, sender, recipients)

        Returns:
            str: SMTP response code and message
                '250 OK: queued as <id>' - Accepted (stored or suppressed)
                '451 ...' - Temporary failure, sender should retry
        """
        queued_id: Optional[str] = None
        try:
            queued_id = generate_envelope_id()
            set_envelope_id(queued_id)

            if not envelope.rcpt_tos:
                logger.warning("Email received with no recipients")
                return '554 No valid recipients'

            mail = self.build_envelope(session, envelope, queued_id)
            logger.info(
                f"Received email: from={mail.mail_from}, to={','.join(mail.rcpt_tos)}, "
                f"size={len(mail.data)} chars"
            )

            result = await self._run(mail, SelectTask.SAVE_MAIL)
            logger.info(f"Pipeline result for {queued_id}: {result.reply()}")
            return result.reply()

        except Exception as e:
            logger.error(f"Unexpected error processing email {queued_id}: {e}", exc_info=True)
            return '451 Temporary server error'
        finally:
            set_envelope_id(None)
