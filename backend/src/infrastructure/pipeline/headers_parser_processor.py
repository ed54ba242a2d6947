"""Headers parser processor - fills envelope fields from the raw message.

Runs before the GUID filter, which reads ``envelope.subject``.
"""

import logging

from domain.pipeline.models import Envelope, Result, SelectTask, MESSAGE_ID_KEY
from domain.pipeline.ports import ProcessorPort
from infrastructure.ingest.mime_parser import extract_metadata, parse_mime_message

logger = logging.getLogger(__name__)


class HeadersParserProcessor(ProcessorPort):
    """Parse headers of saved mail into the envelope.

    Sets ``envelope.subject`` (RFC 2047 decoded) and stores the Message-ID
    in ``envelope.values["message_id"]``. A message that cannot be parsed
    keeps an empty subject; later stages decide what that means.
    """

    name = "HeadersParser"

    def process(self, envelope: Envelope, task: SelectTask) -> Result:
        if task != SelectTask.SAVE_MAIL:
            return Result.accepted(envelope.queued_id)

        try:
            msg = parse_mime_message(envelope.data)
            metadata = extract_metadata(msg)
        except Exception as e:
            logger.error(f"Failed to parse message headers: {e}")
            return Result.accepted(envelope.queued_id)

        envelope.subject = metadata.subject or ""
        envelope.values[MESSAGE_ID_KEY] = metadata.message_id
        logger.debug(f"Parsed headers, subject={envelope.subject!r}")

        return Result.accepted(envelope.queued_id)
