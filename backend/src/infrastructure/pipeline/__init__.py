"""Pipeline infrastructure - driver, registry, assembler and stages."""

from .assembler import build_pipeline, build_registry
from .guid_filter_processor import GuidFilterProcessor
from .headers_parser_processor import HeadersParserProcessor
from .mail_store_processor import MailStoreProcessor
from .pipeline import Pipeline
from .registry import StageRegistry

__all__ = [
    "build_pipeline",
    "build_registry",
    "GuidFilterProcessor",
    "HeadersParserProcessor",
    "MailStoreProcessor",
    "Pipeline",
    "StageRegistry",
]
