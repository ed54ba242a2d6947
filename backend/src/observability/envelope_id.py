"""Envelope ID management for log correlation.

Every message received over SMTP gets a queued id. It is kept in a context
variable so log lines emitted anywhere in the pipeline carry it.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable for the envelope being processed (thread/async-safe)
envelope_id_var: ContextVar[Optional[str]] = ContextVar("envelope_id", default=None)


def generate_envelope_id() -> str:
    """Generate a new queued id (32 hex characters)."""
    return uuid.uuid4().hex


def get_envelope_id() -> str:
    """Get the current envelope id or "no-envelope-id" if not set."""
    return envelope_id_var.get() or "no-envelope-id"


def set_envelope_id(envelope_id: Optional[str]) -> None:
    """Set the envelope id in the current context."""
    envelope_id_var.set(envelope_id)
