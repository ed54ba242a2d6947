"""Exceptions raised by the GUID filter domain logic."""


class GuidFilterError(Exception):
    """Base class for GUID filter errors."""
    pass


class TraceTimeParseError(GuidFilterError):
    """A Received header value does not carry a parseable date."""

    def __init__(self, message: str, header_value: str = ""):
        super().__init__(message)
        self.header_value = header_value


class MessageSplitError(GuidFilterError):
    """The raw message could not be parsed into header and body.

    Carries whatever parts could still be recovered so callers can
    continue with partial data.
    """

    def __init__(self, message: str, parts=None):
        super().__init__(message)
        self.parts = parts


class CorrelationStoreError(GuidFilterError):
    """Base class for correlation store failures."""
    pass


class CorrelationLookupError(CorrelationStoreError):
    """Reading the correlation record failed for a reason other than 'not found'."""
    pass


class CorrelationUpdateError(CorrelationStoreError):
    """Preparing or executing the delivery update failed."""
    pass
