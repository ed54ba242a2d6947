"""Observability module for MailProbe.

Provides structured logging, envelope id correlation and Prometheus metrics.
"""

from .logging_config import configure_logging
from .metrics import (
    guid_filter_decisions_total,
    delivery_delay_seconds,
    correlation_update_failures_total,
    messages_processed_total,
    messages_stored_total,
)
from .envelope_id import envelope_id_var, get_envelope_id, set_envelope_id, generate_envelope_id

__all__ = [
    # Logging
    "configure_logging",
    # Metrics
    "guid_filter_decisions_total",
    "delivery_delay_seconds",
    "correlation_update_failures_total",
    "messages_processed_total",
    "messages_stored_total",
    # Envelope ID
    "envelope_id_var",
    "get_envelope_id",
    "set_envelope_id",
    "generate_envelope_id",
]
