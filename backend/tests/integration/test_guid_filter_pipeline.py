"""Integration tests for the save-mail pipeline.

Runs the default HeadersParser -> GuidFilter -> MailStore chain against an
in-memory SQLite database holding the ping table.
"""

import pytest
from sqlalchemy import func, select

from config import Settings
from domain.pipeline.errors import PipelineInitializationError
from domain.pipeline.models import Envelope, SelectTask
from infrastructure.pipeline.assembler import build_pipeline
from models.stored_mail import StoredMail


def count_stored(engine) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(StoredMail.__table__)).scalar_one()


@pytest.fixture
def pipeline(test_settings, sqlite_engine, correlation_table):
    pipeline = build_pipeline(test_settings, sqlite_engine)
    pipeline.initialize()
    yield pipeline
    pipeline.shutdown()


@pytest.fixture
def make_envelope(raw_message_factory):
    def _make(subject="Order guid: XYZ", queued_id="Q1"):
        return Envelope(
            data=raw_message_factory(subject=subject),
            mail_from="probe@example.com",
            rcpt_tos=["inbox@mailprobe.local"],
            queued_id=queued_id,
        )

    return _make


class TestSaveMailPipeline:
    """Test the probe round trip through all stages"""

    def test_known_guid_is_recorded_and_stored(self, pipeline, make_envelope, seed_ping, fetch_ping, sqlite_engine):
        seed_ping("XYZ")
        envelope = make_envelope()

        result = pipeline.process(envelope, SelectTask.SAVE_MAIL)

        row = fetch_ping("XYZ")
        assert result.reply() == "250 OK: queued as Q1"
        assert not envelope.ignored
        assert row["seen"] == 1
        assert row["time_taken"] == 60
        assert row["header"].startswith("Received: from relay2.example.net")
        assert row["body"] == "Hello from the probe.\n"
        assert row["received_time"] is not None
        assert count_stored(sqlite_engine) == 1

    def test_replayed_message_is_ignored(self, pipeline, make_envelope, seed_ping, sqlite_engine):
        """Test a token can only be consumed once"""
        seed_ping("XYZ")
        pipeline.process(make_envelope(queued_id="Q1"), SelectTask.SAVE_MAIL)

        replay = make_envelope(queued_id="Q2")
        result = pipeline.process(replay, SelectTask.SAVE_MAIL)

        assert result.ok
        assert replay.ignored
        assert count_stored(sqlite_engine) == 1

    def test_unknown_guid_is_not_stored(self, pipeline, make_envelope, seed_ping, fetch_ping, sqlite_engine):
        seed_ping("ABC")
        envelope = make_envelope(subject="Order guid: XYZ")

        result = pipeline.process(envelope, SelectTask.SAVE_MAIL)

        assert result.ok
        assert envelope.ignored
        assert fetch_ping("ABC")["seen"] == 0
        assert count_stored(sqlite_engine) == 0

    def test_subject_without_marker_is_not_stored(self, pipeline, make_envelope, sqlite_engine):
        envelope = make_envelope(subject="Monthly newsletter")

        result = pipeline.process(envelope, SelectTask.SAVE_MAIL)

        assert result.ok
        assert envelope.ignored
        assert count_stored(sqlite_engine) == 0

    def test_recipient_validation_accepts(self, pipeline):
        probe = Envelope(data="", rcpt_tos=["inbox@mailprobe.local"])

        assert pipeline.process(probe, SelectTask.VALIDATE_RCPT).ok


class TestPipelineActivation:
    """Test startup checks"""

    def test_missing_ping_table_refuses_activation(self, test_settings, sqlite_engine):
        pipeline = build_pipeline(test_settings, sqlite_engine)

        with pytest.raises(PipelineInitializationError) as exc_info:
            pipeline.initialize()

        assert "GuidFilter" in str(exc_info.value)
        assert not pipeline.initialized

    def test_pipeline_without_guid_filter_stores_everything(self, sqlite_engine, make_envelope):
        settings = Settings(DATABASE_URL="sqlite://", SAVE_PROCESS="HeadersParser|MailStore")
        pipeline = build_pipeline(settings, sqlite_engine)
        pipeline.initialize()

        pipeline.process(make_envelope(subject="Monthly newsletter"), SelectTask.SAVE_MAIL)

        assert count_stored(sqlite_engine) == 1
