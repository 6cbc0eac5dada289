"""
Services package for tvlisting

This package contains the provider interface, the TV Spielfilm scraper,
filter persistence and the listing service that ties them together.
"""
from tvlisting.services.provider import Provider
from tvlisting.services.tv_spielfilm_provider import TvSpielfilmProvider
from tvlisting.services.filter_file_service import (
    FilterStore,
    read_filter_file,
    write_filter_file,
)
from tvlisting.services.listing_service import ListingService

__all__ = [
    'Provider',
    'TvSpielfilmProvider',
    'FilterStore',
    'read_filter_file',
    'write_filter_file',
    'ListingService',
]
