#!/usr/bin/env python3
"""SMTP Server Startup Script for MailProbe.

Starts an aiosmtpd server that runs received mail through the save-mail
pipeline (by default HeadersParser -> GuidFilter -> MailStore).

Usage:
    python scripts/start_smtp_server.py

Environment Variables (see config.Settings):
    DATABASE_URL: SQLAlchemy URL of the ping/mail database
    GUID_FILTER_LOOKUP_TABLE: Table holding ping records (default: pings)
    GUID_FILTER_LOOKUP_FIELD: Column read on lookup (default: guid)
    SAVE_PROCESS: Stage list (default: HeadersParser|GuidFilter|MailStore)
    SMTP_HOST: Bind address (default: 0.0.0.0)
    SMTP_PORT: Listen port (default: 2525)
    SMTP_DOMAIN: Server hostname (default: mailprobe.example.com)
    SMTP_MAX_SIZE: Max email size in bytes (default: 10485760)
    LOG_LEVEL / LOG_JSON: Logging configuration
"""

import asyncio
import logging
import os
import sys

from aiosmtpd.controller import Controller

# Add backend/src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import get_settings
from database import create_db_engine
from domain.pipeline.errors import PipelineInitializationError
from infrastructure.ingest.smtp_handler import MailProbeSMTPHandler
from infrastructure.pipeline.assembler import build_pipeline
from observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def main() -> int:
    """Start SMTP server with the MailProbe pipeline."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    logger.info("=== MailProbe SMTP Server Starting ===")
    logger.info(f"SMTP Bind: {settings.SMTP_HOST}:{settings.SMTP_PORT}")
    logger.info(f"SMTP Domain: {settings.SMTP_DOMAIN}")
    logger.info(f"Max Message Size: {settings.SMTP_MAX_SIZE} bytes")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[-1]}")  # Hide credentials
    logger.info(f"Pipeline: {settings.SAVE_PROCESS}")

    engine = create_db_engine(settings)

    try:
        pipeline = build_pipeline(settings, engine)
        pipeline.initialize()
    except (ValueError, PipelineInitializationError) as e:
        logger.error(f"Pipeline could not be activated: {e}")
        engine.dispose()
        return 1

    controller = Controller(
        MailProbeSMTPHandler(pipeline),
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        server_hostname=settings.SMTP_DOMAIN,
        data_size_limit=settings.SMTP_MAX_SIZE,
        enable_SMTPUTF8=True,
    )
    controller.start()

    logger.info(f"SMTP server started on {settings.SMTP_HOST}:{settings.SMTP_PORT}")
    logger.info("Press Ctrl+C to stop")

    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        logger.info("Shutting down SMTP server...")
        controller.stop()
        pipeline.shutdown()
        engine.dispose()
        logger.info("SMTP server stopped")

    return 0


if __name__ == '__main__':
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, exiting")
        sys.exit(0)
    except Exception as e:
        logger.error(f"SMTP server failed: {e}", exc_info=True)
        sys.exit(1)
