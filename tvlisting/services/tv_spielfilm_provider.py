"""
TV Spielfilm Provider

Scrapes the evening listing of tvspielfilm.de into a Program. Channel icons
come from a single sprite image; movie descriptions are loaded on demand from
each movie's detail page.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from urllib.parse import urljoin

import httpx
from lxml import etree
from PIL import Image

from tvlisting.config import settings
from tvlisting.errors import ParsingWebsiteError, TvListingError
from tvlisting.models import Channel, Movie, MovieBuilder, Program
from tvlisting.services.provider import Provider
from tvlisting.utils.html_parsing import (
    get_attribute,
    get_text,
    parse_document,
    select_all,
    select_first,
)
from tvlisting.utils.http_operations import create_client, fetch_bytes, fetch_page
from tvlisting.utils.image_operations import crop_tile, decode_sprite
from tvlisting.utils.logging_helpers import (
    log_fetch_end,
    log_fetch_start,
    log_program_summary,
)


logger = logging.getLogger(__name__)

LISTING_ROW_SELECTOR = (
    "body #wrapper #main .content-area #content .tvlistings .content-holder "
    ".tab-content .info-table tbody .hover"
)
CHANNEL_NAME_SELECTOR = ".programm-col1 a"
MOVIE_TITLE_SELECTOR = ".col-3 span a strong"
MOVIE_GENRE_SELECTOR = ".col-4 span"
MOVIE_DIVISION_SELECTOR = ".col-5 span"
MOVIE_LINK_SELECTOR = ".col-3 span a"
DESCRIPTION_SELECTOR = "#content div div article section.broadcast-detail__description p"

CHANNEL_NAME_SUFFIX = " Programm"

# Years are unsigned 32-bit; longer digit runs are dropped like any other non-year
MAX_YEAR = 2**32 - 1

# Order of the icons in the sprite, top to bottom
ICON_ORDER: tuple[str, ...] = (
    "Das Erste",
    "ZDF",
    "RTL",
    "SAT.1",
    "ProSieben",
    "kabel eins",
    "RTL II",
    "VOX",
    "TELE 5",
    "3sat",
    "ARTE",
    "ZDFneo",
    "ONE",
    "ServusTV Deutschland",
    "NITRO",
    "DMAX",
    "sixx",
    "SAT.1 Gold",
    "ProSieben MAXX",
    "COMEDY CENTRAL",
    "RTLplus",
    "WDR",
    "NDR",
    "BR",
    "SWR/SR",
    "HR",
    "MDR",
    "RBB",
    "tv.berlin",
)
_ICON_INDEX = {name: index for index, name in enumerate(ICON_ORDER)}


def _normalize_channel_name(raw: str) -> str:
    """Strip the trailing " Programm" the site appends to channel link titles"""
    if raw.endswith(CHANNEL_NAME_SUFFIX):
        return raw[: -len(CHANNEL_NAME_SUFFIX)]
    return raw


def _parse_year(link_title: str) -> int | None:
    """Year from the last space-separated token of the link title, e.g. 'Spielfilm, USA 2019'"""
    token = link_title.split(" ")[-1]
    if token.isascii() and token.isdecimal():
        year = int(token)
        if year <= MAX_YEAR:
            return year
    return None


class TvSpielfilmProvider(Provider):
    """Provider for the tvspielfilm.de evening listing.

    Keeps a cache mapping every movie returned by get_program to its detail
    page. The cache key is the Movie value exactly as returned, i.e. without a
    description; a movie that was already enriched will not be found again.
    """

    def __init__(
        self,
        *,
        listing_url: str | None = None,
        icons_url: str | None = None,
        icon_size: int | None = None,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.listing_url = listing_url or settings.listing_url
        self.icons_url = icons_url or settings.icons_url
        self.icon_size = icon_size or settings.icon_size
        if timeout_sec is None:
            self.timeout: float | None = settings.http_timeout
        else:
            self.timeout = timeout_sec or None
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport
        self._more_information_urls: dict[Movie, str] = {}

    def clone(self) -> TvSpielfilmProvider:
        provider = TvSpielfilmProvider(
            listing_url=self.listing_url,
            icons_url=self.icons_url,
            icon_size=self.icon_size,
            timeout_sec=self.timeout or 0,
            user_agent=self.user_agent,
            transport=self._transport,
        )
        # Keys and values are immutable, a new dict is a full copy
        provider._more_information_urls = dict(self._more_information_urls)
        return provider

    def _client(self) -> httpx.AsyncClient:
        return create_client(self.timeout, self.user_agent, self._transport)

    async def get_program(self) -> Program:
        log_fetch_start(logger, self.listing_url)

        async with self._client() as client:
            results = await asyncio.gather(
                fetch_page(client, self.listing_url),
                fetch_bytes(client, self.icons_url),
                return_exceptions=True,
            )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        (markup, encoding), sprite_data = results

        sprite = decode_sprite(sprite_data)
        document = parse_document(markup, encoding)

        program, detail_urls = self._build_program(document, sprite)

        # Only a complete fetch touches the cache
        self._more_information_urls.update(detail_urls)

        log_program_summary(
            logger,
            len(program),
            sum(1 for channel, _ in program if channel.icon is not None),
            len(detail_urls),
        )
        log_fetch_end(logger, self.listing_url)
        return program

    def _build_program(
        self,
        document: etree._Element,
        sprite: Image.Image,
    ) -> tuple[Program, dict[Movie, str]]:
        program = Program()
        detail_urls: dict[Movie, str] = {}

        rows = select_all(document, LISTING_ROW_SELECTOR)
        logger.debug("Found %s listing rows", len(rows))

        for index, row in enumerate(rows):
            channel, movie, detail_url = self._parse_row(index, row, sprite)
            if detail_url is not None:
                detail_urls[movie] = detail_url
            program.add(channel, movie)

        return program, detail_urls

    def _parse_row(
        self,
        index: int,
        row: etree._Element,
        sprite: Image.Image,
    ) -> tuple[Channel, Movie, str | None]:
        raw_channel_name = get_attribute(row, CHANNEL_NAME_SELECTOR, "title")
        if raw_channel_name is None:
            logger.error("Listing row %s has no channel name", index)
            raise ParsingWebsiteError()
        channel_name = _normalize_channel_name(raw_channel_name)

        title = get_text(row, MOVIE_TITLE_SELECTOR)
        if title is None:
            logger.error("Listing row %s (%s) has no movie title", index, channel_name)
            raise ParsingWebsiteError()

        channel = Channel(channel_name, self._icon_for(channel_name, sprite))
        builder = MovieBuilder(title)

        genre = get_text(row, MOVIE_GENRE_SELECTOR)
        if genre is not None:
            builder.with_genre(genre.strip())

        division = get_text(row, MOVIE_DIVISION_SELECTOR)
        if division is not None:
            builder.with_division(division.strip().split(" ")[0])

        detail_url = None
        link = select_first(row, MOVIE_LINK_SELECTOR)
        if link is not None:
            year = _parse_year(link.get("title", ""))
            if year is not None:
                builder.with_year(year)

            href = link.get("href")
            if href:
                try:
                    detail_url = urljoin(self.listing_url, href)
                except ValueError:
                    logger.warning("Listing row %s (%s) has a malformed link %r", index, channel_name, href)

        return channel, builder.build(), detail_url

    def _icon_for(self, channel_name: str, sprite: Image.Image) -> Image.Image | None:
        icon_index = _ICON_INDEX.get(channel_name)
        if icon_index is None:
            return None
        return crop_tile(sprite, icon_index, self.icon_size)

    async def get_more_information(self, movie: Movie) -> Movie:
        url = self._more_information_urls.get(movie)
        if url is None:
            logger.debug("No detail page known for %r", movie.title)
            return movie

        try:
            async with self._client() as client:
                markup, encoding = await fetch_page(client, url)
            document = parse_document(markup, encoding)
        except TvListingError as exc:
            logger.warning("Could not load details for %r from %s: %s", movie.title, url, exc)
            return movie

        paragraphs = select_all(document, DESCRIPTION_SELECTOR)
        if not paragraphs:
            logger.warning("Detail page %s has no description for %r", url, movie.title)
            return movie

        description = "".join(paragraph.text_content() + "\n\n" for paragraph in paragraphs)
        return replace(movie, description=description)
