"""Pipeline assembler - builds the save-mail pipeline from settings."""

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from config import Settings
from infrastructure.correlation.sql_correlation_store import SQLCorrelationStore
from .guid_filter_processor import GuidFilterProcessor
from .headers_parser_processor import HeadersParserProcessor
from .mail_store_processor import MailStoreProcessor
from .pipeline import Pipeline
from .registry import StageRegistry

logger = logging.getLogger(__name__)


def build_registry(settings: Settings, engine: Engine) -> StageRegistry:
    """Create a registry with every stage this service ships.

    Stages are only constructed when requested, so a pipeline without the
    GUID filter never touches the correlation table.
    """
    registry = StageRegistry()
    registry.register("HeadersParser", HeadersParserProcessor)
    registry.register(
        "GuidFilter",
        lambda: GuidFilterProcessor(
            SQLCorrelationStore(
                engine,
                table_name=settings.GUID_FILTER_LOOKUP_TABLE,
                lookup_field=settings.GUID_FILTER_LOOKUP_FIELD,
            )
        ),
    )
    registry.register("MailStore", lambda: MailStoreProcessor(engine))
    return registry


def build_pipeline(
    settings: Settings,
    engine: Engine,
    registry: Optional[StageRegistry] = None,
) -> Pipeline:
    """Build the pipeline described by ``settings.SAVE_PROCESS``.

    Args:
        settings: Application settings
        engine: Engine shared by the database-backed stages
        registry: Registry to resolve names with (default: build_registry)

    Returns:
        Pipeline: Not yet initialized

    Raises:
        ValueError: If SAVE_PROCESS is empty or names an unknown stage
    """
    registry = registry or build_registry(settings, engine)

    names = settings.save_process_stages
    if not names:
        raise ValueError("SAVE_PROCESS does not name any stage")

    stages = [registry.create(name) for name in names]
    logger.info(f"Built pipeline: {' -> '.join(stage.name for stage in stages)}")
    return Pipeline(stages)
