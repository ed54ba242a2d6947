"""Unit tests for StageRegistry and the pipeline assembler"""

import pytest

from config import Settings
from domain.pipeline.models import Result
from domain.pipeline.ports import ProcessorPort
from infrastructure.pipeline.assembler import build_pipeline, build_registry
from infrastructure.pipeline.guid_filter_processor import GuidFilterProcessor
from infrastructure.pipeline.headers_parser_processor import HeadersParserProcessor
from infrastructure.pipeline.mail_store_processor import MailStoreProcessor
from infrastructure.pipeline.registry import StageRegistry


class DummyStage(ProcessorPort):
    name = "Dummy"

    def process(self, envelope, task):
        return Result.accepted()


class TestStageRegistry:
    """Test registration and lookup"""

    def test_create_returns_new_instance(self):
        registry = StageRegistry()
        registry.register("Dummy", DummyStage)

        first = registry.create("Dummy")
        second = registry.create("Dummy")

        assert isinstance(first, DummyStage)
        assert first is not second

    def test_names_are_case_insensitive(self):
        registry = StageRegistry()
        registry.register("GuidFilter", DummyStage)

        assert "guidfilter" in registry
        assert " GUIDFILTER " in registry
        assert isinstance(registry.create("guidFilter"), DummyStage)

    def test_unknown_stage(self):
        registry = StageRegistry()
        registry.register("Dummy", DummyStage)

        with pytest.raises(ValueError, match="Unknown pipeline stage: Nope"):
            registry.create("Nope")

    def test_duplicate_registration(self):
        registry = StageRegistry()
        registry.register("Dummy", DummyStage)

        with pytest.raises(ValueError):
            registry.register("dummy", DummyStage)

    def test_empty_name(self):
        with pytest.raises(ValueError):
            StageRegistry().register("  ", DummyStage)

    def test_names_and_len(self):
        registry = StageRegistry()
        registry.register("B", DummyStage)
        registry.register("A", DummyStage)

        assert registry.names() == ["a", "b"]
        assert len(registry) == 2


class TestBuildPipeline:
    """Test assembling pipelines from SAVE_PROCESS"""

    def test_default_chain(self, test_settings, sqlite_engine):
        pipeline = build_pipeline(test_settings, sqlite_engine)

        assert [type(stage) for stage in pipeline.stages] == [
            HeadersParserProcessor,
            GuidFilterProcessor,
            MailStoreProcessor,
        ]
        assert not pipeline.initialized

    def test_guid_filter_uses_configured_table(self, sqlite_engine):
        settings = Settings(
            DATABASE_URL="sqlite://",
            SAVE_PROCESS="GuidFilter",
            GUID_FILTER_LOOKUP_TABLE="probe_pings",
            GUID_FILTER_LOOKUP_FIELD="mailbox",
        )

        (stage,) = build_pipeline(settings, sqlite_engine).stages

        assert stage.store.table_name == "probe_pings"
        assert stage.store.lookup_field == "mailbox"

    def test_whitespace_and_blanks_are_ignored(self, sqlite_engine):
        settings = Settings(DATABASE_URL="sqlite://", SAVE_PROCESS=" HeadersParser || MailStore ")

        pipeline = build_pipeline(settings, sqlite_engine)

        assert [stage.name for stage in pipeline.stages] == ["HeadersParser", "MailStore"]

    def test_unknown_stage_name(self, sqlite_engine):
        settings = Settings(DATABASE_URL="sqlite://", SAVE_PROCESS="HeadersParser|Spamassassin")

        with pytest.raises(ValueError, match="Spamassassin"):
            build_pipeline(settings, sqlite_engine)

    def test_empty_save_process(self, sqlite_engine):
        settings = Settings(DATABASE_URL="sqlite://", SAVE_PROCESS=" | ")

        with pytest.raises(ValueError):
            build_pipeline(settings, sqlite_engine)

    def test_custom_registry(self, test_settings, sqlite_engine):
        registry = StageRegistry()
        registry.register("HeadersParser", DummyStage)
        registry.register("GuidFilter", DummyStage)
        registry.register("MailStore", DummyStage)

        pipeline = build_pipeline(test_settings, sqlite_engine, registry=registry)

        assert len(pipeline) == 3
        assert all(isinstance(stage, DummyStage) for stage in pipeline.stages)

    def test_registry_ships_all_stages(self, test_settings, sqlite_engine):
        registry = build_registry(test_settings, sqlite_engine)

        assert registry.names() == ["guidfilter", "headersparser", "mailstore"]
