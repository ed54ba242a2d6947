"""Correlation store adapters."""

from .sql_correlation_store import SQLCorrelationStore

__all__ = ["SQLCorrelationStore"]
