"""Value objects used by the GUID filter."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class MessageParts:
    """Raw header block and body of a message."""

    header: str = ""
    body: str = ""


@dataclass(frozen=True)
class DeliveryUpdate:
    """Values written back to a correlation record once its ping arrived.

    Attributes:
        token: Correlation token (GUID) identifying the record
        time_taken: Delivery delay in whole seconds
        header: Raw header block of the received message
        body: Raw body of the received message
        received_time: Wall-clock time the message was processed
    """

    token: str
    time_taken: int
    header: str
    body: str
    received_time: datetime


@dataclass(frozen=True)
class CorrelationRecord:
    """Unseen correlation record found for a token.

    Attributes:
        token: Correlation token (GUID) the record is keyed by
        lookup_value: Value of the configured lookup field (may be None)
    """

    token: str
    lookup_value: Optional[Any] = None
