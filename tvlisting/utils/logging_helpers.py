"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging without excessive decorative separators.
"""
import logging
from datetime import datetime, timezone


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_fetch_start(logger: logging.Logger, url: str) -> None:
    """Log listing fetch operation start."""
    logger.info(f"Listing fetch of {url} started at {datetime.now(timezone.utc).isoformat()}")


def log_fetch_end(logger: logging.Logger, url: str) -> None:
    """Log listing fetch operation end."""
    logger.info(f"Listing fetch of {url} completed at {datetime.now(timezone.utc).isoformat()}")


def log_program_summary(
    logger: logging.Logger,
    entries_count: int,
    icons_count: int,
    detail_urls_count: int
) -> None:
    """
    Log the result of building a program.

    Args:
        logger: Logger instance
        entries_count: Number of schedule entries
        icons_count: Number of entries whose channel got an icon
        detail_urls_count: Number of entries with a detail page
    """
    logger.info(
        f"Program summary - Entries: {entries_count}, Icons: {icons_count}, "
        f"Detail pages: {detail_urls_count}"
    )


def log_filter_summary(
    logger: logging.Logger,
    total_entries: int,
    visible_entries: int
) -> None:
    """
    Log how many entries a program filter hid.

    Args:
        logger: Logger instance
        total_entries: Entries before filtering
        visible_entries: Entries left after filtering
    """
    logger.info(
        f"Filtered program: {visible_entries} of {total_entries} entries visible "
        f"({total_entries - visible_entries} hidden)"
    )
