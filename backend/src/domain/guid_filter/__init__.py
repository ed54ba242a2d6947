"""Domain logic for the GUID filter.

Token extraction, Received timestamp parsing, delay calculation and
message splitting. Pure functions, no I/O besides the store port.
"""

from .delay import calculate_delay, sort_timestamps
from .errors import (
    GuidFilterError,
    TraceTimeParseError,
    MessageSplitError,
    CorrelationStoreError,
    CorrelationLookupError,
    CorrelationUpdateError,
)
from .models import MessageParts, DeliveryUpdate, CorrelationRecord
from .ports import CorrelationStorePort
from .splitter import split_message, extract_header_block, extract_body
from .token import extract_correlation_token, GUID_PATTERN
from .trace_time import parse_trace_time, extract_received_times, received_header_values

__all__ = [
    "calculate_delay",
    "sort_timestamps",
    "GuidFilterError",
    "TraceTimeParseError",
    "MessageSplitError",
    "CorrelationStoreError",
    "CorrelationLookupError",
    "CorrelationUpdateError",
    "MessageParts",
    "DeliveryUpdate",
    "CorrelationRecord",
    "CorrelationStorePort",
    "split_message",
    "extract_header_block",
    "extract_body",
    "extract_correlation_token",
    "GUID_PATTERN",
    "parse_trace_time",
    "extract_received_times",
    "received_header_values",
]
