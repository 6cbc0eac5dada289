"""
Provider capability interface.

A provider turns a remote source into a Program and can enrich single
movies later. Bulk retrieval fails hard, enrichment never fails.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar

from tvlisting.models import Movie, Program


P = TypeVar("P", bound="Provider")


class Provider(ABC):
    """Source of television programs.

    Implementations must be constructible without arguments. A single
    instance must not be called concurrently; clone it to run a call in
    isolation.
    """

    @abstractmethod
    def clone(self: P) -> P:
        """Return an independent copy that shares no mutable state with this provider."""

    @abstractmethod
    async def get_program(self) -> Program:
        """
        Fetch the current program.

        The returned movies need not be complete. May update internal state
        used by get_more_information.

        Raises:
            NetworkingError: On any transport failure
            ParsingWebsiteError: If the source content is not as expected
        """

    @abstractmethod
    async def get_more_information(self, movie: Movie) -> Movie:
        """
        Return the movie with more information filled in.

        Must not raise for network or parsing problems; the given movie is
        returned unchanged in that case.
        """
