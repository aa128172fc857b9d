"""YouTube Podcast Sync - Main application entry point."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from podsync.config import get_settings, load_sources
from podsync.logging import setup_logging
from podsync.net import make_client
from podsync.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Download new channel items and publish them as podcast feeds"
    )
    parser.add_argument(
        "--sources",
        type=Path,
        help="Path to the JSON sources document (default: PODSYNC_SOURCES_FILE)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for a single scheduled run."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(verbose=args.verbose)

    sources_file = args.sources or settings.sources_file
    try:
        sources = load_sources(sources_file)
    except (OSError, ValidationError) as e:
        logger.error(f"Cannot load sources from {sources_file}: {e}")
        return 1

    logger.info(f"MediaFolder: {settings.media_folder}")
    logger.info(f"MediaFolderNotify: {settings.media_folder_notify}")
    logger.info(f"RSSFolder: {settings.rss_folder}")
    logger.info(f"RSSTemplate: {settings.rss_template}")
    logger.info(f"HTTPHost: {settings.http_host}")
    logger.info(f"Config: {settings.config_dir}")

    with make_client(settings.http_timeout) as client:
        report = Orchestrator(settings, sources, client).run()

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
