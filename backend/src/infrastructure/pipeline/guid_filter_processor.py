"""GUID filter processor - correlates probe emails with their ping records.

Extracts a GUID from the subject and looks it up in the correlation table.
If no unseen record exists the envelope is annotated with ``ignore`` so the
mail store stage does not persist it. If the record is found, the delivery
delay is computed from the Received headers and written back together with
the raw header and body, and the record is marked seen.

The stage never stops the pipeline: it always returns an ok Result and the
next stage runs.

Config Options:
    GUID_FILTER_LOOKUP_TABLE: table holding ping records
    GUID_FILTER_LOOKUP_FIELD: column read on lookup

Input:
    envelope.subject, filled by the HeadersParser stage
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Pattern

from domain.guid_filter.delay import calculate_delay
from domain.guid_filter.errors import (
    CorrelationLookupError,
    CorrelationStoreError,
    CorrelationUpdateError,
    MessageSplitError,
)
from domain.guid_filter.models import DeliveryUpdate, MessageParts
from domain.guid_filter.ports import CorrelationStorePort
from domain.guid_filter.splitter import split_message
from domain.guid_filter.token import GUID_PATTERN, extract_correlation_token
from domain.guid_filter.trace_time import extract_received_times
from domain.pipeline.errors import StageInitializationError
from domain.pipeline.models import Envelope, Result, SelectTask
from domain.pipeline.ports import ProcessorPort
from observability.metrics import (
    correlation_update_failures_total,
    delivery_delay_seconds,
    guid_filter_decisions_total,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GuidFilterProcessor(ProcessorPort):
    """Pipeline stage deciding whether a probe email is kept.

    Decision table for SAVE_MAIL:
    - no GUID in subject → ignore
    - GUID unknown or already seen → ignore
    - store lookup failed → ignore (logged as error)
    - GUID found → keep, write delay/header/body, mark seen

    Other tasks pass through without touching the store.
    """

    name = "GuidFilter"

    def __init__(
        self,
        store: CorrelationStorePort,
        token_pattern: Pattern[str] = GUID_PATTERN,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the processor.

        Args:
            store: Correlation store adapter
            token_pattern: Precompiled subject pattern, token in group 1
            clock: Returns the wall-clock "processed at" time
        """
        self.store = store
        self.token_pattern = token_pattern
        self.clock = clock

    def initialize(self) -> None:
        """Check that the correlation table can be read.

        Raises:
            StageInitializationError: If the store rejects the read
        """
        logger.info("Initializing GuidFilter processor...")
        try:
            self.store.validate_access()
        except CorrelationStoreError as e:
            raise StageInitializationError(str(e), stage_name=self.name) from e

    def process(self, envelope: Envelope, task: SelectTask) -> Result:
        if task == SelectTask.SAVE_MAIL:
            self._filter(envelope)
        return Result.accepted(envelope.queued_id)

    def _filter(self, envelope: Envelope) -> None:
        guid = extract_correlation_token(envelope.subject, self.token_pattern)
        if guid is None:
            logger.warning("Could not extract GUID from the subject")
            guid_filter_decisions_total.labels(outcome="no_token").inc()
            envelope.suppress()
            return

        try:
            record = self.store.find_unseen(guid)
        except CorrelationLookupError as e:
            # TODO: separate store outages from exhausted tokens once the
            # mail store can requeue instead of dropping.
            logger.error(f"Could not lookup GUID - {e}", extra={"guid": guid})
            guid_filter_decisions_total.labels(outcome="lookup_error").inc()
            envelope.suppress()
            return

        if record is None:
            logger.info(f"GUID {guid} not found or it was already seen", extra={"guid": guid})
            guid_filter_decisions_total.labels(outcome="not_found").inc()
            envelope.suppress()
            return

        guid_filter_decisions_total.labels(outcome="accepted").inc()
        self._record_delivery(guid, envelope.data)

    def _record_delivery(self, guid: str, raw_message: str) -> None:
        """Compute the delay and write it back; failures are only logged."""
        delay = calculate_delay(extract_received_times(raw_message))
        parts = self._split(raw_message)

        delivery = DeliveryUpdate(
            token=guid,
            time_taken=delay,
            header=parts.header,
            body=parts.body,
            received_time=self.clock(),
        )

        try:
            self.store.record_delivery(delivery)
        except CorrelationUpdateError as e:
            logger.error(f"Could not update delay - {e}", extra={"guid": guid})
            correlation_update_failures_total.inc()
            return

        delivery_delay_seconds.observe(delay)
        logger.info(f"Updated delay ({delay}s) for GUID {guid}", extra={"guid": guid})

    @staticmethod
    def _split(raw_message: str) -> MessageParts:
        try:
            return split_message(raw_message)
        except MessageSplitError as e:
            logger.error(f"Could not parse header and body of email - {e}")
            return e.parts or MessageParts()
