"""
Listing Service

Ties a provider and the filter store together for a UI driver: refreshes the
program, keeps it filtered, and enriches selected movies.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

from tvlisting.filters import FilterType
from tvlisting.models import Movie, Program
from tvlisting.services.filter_file_service import FilterStore
from tvlisting.services.provider import Provider
from tvlisting.utils.logging_helpers import (
    log_filter_summary,
    log_section_end,
    log_section_start,
)


logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Provider)


class ListingService(Generic[P]):
    """
    Coordinates program refreshes and filter changes.

    Refreshes run on a clone of the provider so a failed fetch leaves the
    current provider and program untouched. An internal asyncio.Lock ensures
    only one refresh runs at a time.
    """

    def __init__(self, provider: P, filter_store: FilterStore):
        """Initialize the service with an empty program."""
        self.provider = provider
        self.filter_store = filter_store
        self.program = Program()
        self._refresh_lock = asyncio.Lock()

    @property
    def visible_program(self) -> Program:
        """The current program without the entries hidden by the filter."""
        return self.filter_store.program_filter.filter(self.program)

    def is_refreshing(self) -> bool:
        return self._refresh_lock.locked()

    async def refresh(self) -> Program | None:
        """
        Fetch a new program and return its visible part.

        Returns:
            The filtered program, or None if a refresh is already running

        Raises:
            NetworkingError: If the provider cannot reach the source
            ParsingWebsiteError: If the provider cannot parse the source
        """
        if self._refresh_lock.locked():
            logger.warning("Program refresh already in progress, skipping this request")
            return None

        async with self._refresh_lock:
            log_section_start(logger, "program refresh")
            provider = self.provider.clone()
            try:
                program = await provider.get_program()
            except Exception as exc:
                logger.error("Program refresh failed: %s", exc)
                raise

            self.provider = provider
            self.program = program
            visible = self.visible_program
            log_filter_summary(logger, len(program), len(visible))
            log_section_end(logger, "program refresh")
            return visible

    async def add_filter(self, attribute: FilterType) -> Program:
        """
        Hide entries matching the attribute and persist the rule.

        Returns:
            The current program filtered with the extended rule set
        """
        logger.info("Adding %s filter %r", attribute.kind.value, attribute.value)
        await self.filter_store.add(attribute)
        visible = self.visible_program
        log_filter_summary(logger, len(self.program), len(visible))
        return visible

    async def more_information(self, movie: Movie) -> Movie:
        """Enrich the movie using a clone of the current provider."""
        return await self.provider.clone().get_more_information(movie)
