"""
tvlisting

Scrapes a television listing into a typed program and hides entries matching
saved attribute filters.
"""
from tvlisting.errors import (
    NetworkingError,
    ParsingFileError,
    ParsingWebsiteError,
    TvListingError,
)
from tvlisting.filters import (
    ChannelAttribute,
    Filters,
    MovieAttribute,
    ProgramFilter,
    program_filter_from_records,
    program_filter_to_records,
)
from tvlisting.models import Channel, Movie, MovieBuilder, Program

__version__ = "0.1.0"

__all__ = [
    'Channel',
    'ChannelAttribute',
    'Filters',
    'Movie',
    'MovieAttribute',
    'MovieBuilder',
    'NetworkingError',
    'ParsingFileError',
    'ParsingWebsiteError',
    'Program',
    'ProgramFilter',
    'TvListingError',
    'program_filter_from_records',
    'program_filter_to_records',
]
