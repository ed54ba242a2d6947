"""Pytest fixtures for pipeline and GUID filter testing.

Provides reusable test fixtures for:
- In-memory SQLite engine shared across connections
- Correlation (ping) table with helpers to seed records
- Raw probe messages with Received headers

Usage:
    def test_lookup(correlation_table, seed_ping, sqlite_engine):
        seed_ping("XYZ")
        ...
"""

import sys
from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest
from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

# Adjust imports based on project structure
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from config import Settings
from database import create_db_engine
from models.correlation_record import build_correlation_table
from models.base import Base


PING_TABLE = "pings"

# Two hops, 60 seconds apart (15:04:15 -> 15:05:15, -0700)
DEFAULT_RECEIVED = [
    "from relay2.example.net (relay2.example.net [198.51.100.7])\n"
    "\tby mx.mailprobe.local with ESMTP id 7Fa2; Mon, 2 Jan 2006 15:05:15 -0700",
    "from sender.example.com (sender.example.com [192.0.2.10])\n"
    "\tby relay2.example.net with ESMTP id 19Cd; Mon, 2 Jan 2006 15:04:15 -0700",
]


def build_raw_message(
    subject: str = "Order guid: XYZ",
    received: Optional[List[str]] = None,
    body: str = "Hello from the probe.\n",
) -> str:
    """Build a raw RFC 5322 message with Received headers first."""
    received = DEFAULT_RECEIVED if received is None else received
    lines = [f"Received: {value}" for value in received]
    lines += [
        "From: probe@example.com",
        "To: inbox@mailprobe.local",
        f"Subject: {subject}",
        "Message-ID: <probe-1@example.com>",
        "Date: Mon, 2 Jan 2006 15:04:10 -0700",
    ]
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def raw_message_factory() -> Callable[..., str]:
    """Factory building raw probe messages."""
    return build_raw_message


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Settings pointing at an in-memory SQLite database."""
    return Settings(
        DATABASE_URL="sqlite://",
        GUID_FILTER_LOOKUP_TABLE=PING_TABLE,
        GUID_FILTER_LOOKUP_FIELD="guid",
        SAVE_PROCESS="HeadersParser|GuidFilter|MailStore",
        LOG_JSON=False,
    )


@pytest.fixture(scope="function")
def sqlite_engine(test_settings: Settings) -> Generator[Engine, None, None]:
    """Fresh in-memory database per test."""
    engine = create_db_engine(test_settings)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def correlation_table(sqlite_engine: Engine):
    """Create the ping table and return its Table object."""
    table = build_correlation_table(PING_TABLE, "guid")
    table.metadata.create_all(bind=sqlite_engine)
    return table


@pytest.fixture(scope="function")
def mail_table(sqlite_engine: Engine):
    """Create the mail table used by the mail store stage."""
    Base.metadata.create_all(bind=sqlite_engine)
    return Base.metadata.tables["mail"]


@pytest.fixture
def seed_ping(sqlite_engine: Engine, correlation_table) -> Callable[..., None]:
    """Insert a ping record."""

    def _seed(guid: str, seen: int = 0, **extra) -> None:
        with sqlite_engine.begin() as conn:
            conn.execute(insert(correlation_table).values(guid=guid, seen=seen, **extra))

    return _seed


@pytest.fixture
def fetch_ping(sqlite_engine: Engine, correlation_table) -> Callable[[str], Optional[dict]]:
    """Read a ping record back as a dict."""

    def _fetch(guid: str) -> Optional[dict]:
        with sqlite_engine.connect() as conn:
            row = conn.execute(
                select(correlation_table).where(correlation_table.c.guid == guid)
            ).mappings().first()
        return dict(row) if row is not None else None

    return _fetch
