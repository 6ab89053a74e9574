"""CLI runner: watch mentions and launch tokens without the HTTP API"""
import logging

logger = logging.getLogger(__name__)

import asyncio
import sys
import os

# Add parent dir to path
sys.path.insert(0, os.path.dirname(__file__))

from dotenv import load_dotenv
load_dotenv()

from config import Settings
from logging_config import setup_logging
from launchpad.pipeline import build_pipeline
from launchpad.processed_store import apply_migrations


async def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    if settings.database_url:
        applied = await asyncio.to_thread(apply_migrations, settings.database_url)
        logger.info("Applied %d migrations", applied)

    pipeline = build_pipeline(settings)
    if pipeline.monitor is None:
        logger.error("Monitor not configured: set TWITTER_HANDLE and SOLANA_PRIVATE_KEY")
        return 1

    logger.info("Tweet-to-Launch - watching @%s", settings.twitter_handle)
    await pipeline.start_monitor()
    try:
        await pipeline.monitor.join()
    finally:
        await pipeline.shutdown()
        logger.info("Processed %d mentions", pipeline.monitor_status()["processedCount"])
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
