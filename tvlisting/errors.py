"""
Error types raised by the listing core.

Every error is terminal to the operation that raised it; nothing in the core
retries. Callers decide on fallbacks (e.g. an empty filter set).
"""


class TvListingError(Exception):
    """Base class for all errors exposed by tvlisting"""

    default_message = "An unexpected error occured."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NetworkingError(TvListingError):
    """Raised on any transport failure while talking to the listing source"""

    default_message = "A networking error occured. Are you connected to the internet?"


class ParsingWebsiteError(TvListingError):
    """Raised when the listing markup or sprite violates structural assumptions"""

    default_message = "Could not parse the website. Maybe it has changed?"


class ParsingFileError(TvListingError):
    """Raised when the filter file cannot be read, written or decoded"""

    default_message = "Could not parse the filter file."
