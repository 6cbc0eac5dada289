"""
Domain model for the television listing.

Channel and Movie are immutable values; Program is the ordered schedule
built from one listing fetch.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from PIL import Image


@dataclass(frozen=True, slots=True, eq=False)
class Channel:
    """A channel must have a name and may carry an icon.

    The icon is copied into RGBA on construction so the channel owns its
    bitmap exclusively. Equality and hashing use the name and the icon's
    pixel content.
    """
    name: str
    icon: Image.Image | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.icon is not None:
            object.__setattr__(self, "icon", self.icon.convert("RGBA"))

    def _icon_key(self) -> tuple[int, int, bytes] | None:
        if self.icon is None:
            return None
        width, height = self.icon.size
        return width, height, self.icon.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Channel):
            return NotImplemented
        return self.name == other.name and self._icon_key() == other._icon_key()

    def __hash__(self) -> int:
        return hash((self.name, self._icon_key()))

    def icon_rgba(self) -> tuple[int, int, bytes] | None:
        """Return the icon as (width, height, rgba_bytes) with a stride of 4 * width."""
        return self._icon_key()


@dataclass(frozen=True, slots=True)
class Movie:
    """A movie must have a title; year, genre, division and description are optional.

    Movies are hashed by all fields, so the same listing entry compares equal
    across fetches only while every known field matches.
    """
    title: str
    year: int | None = None
    genre: str | None = None
    division: str | None = None
    description: str | None = None


class MovieBuilder:
    """Build movies field by field as they are discovered."""

    def __init__(self, title: str) -> None:
        self._title = title
        self._year: int | None = None
        self._genre: str | None = None
        self._division: str | None = None

    def with_year(self, year: int) -> MovieBuilder:
        if year < 0:
            raise ValueError(f"year must be >= 0, got {year}")
        self._year = year
        return self

    def with_genre(self, genre: str) -> MovieBuilder:
        self._genre = genre
        return self

    def with_division(self, division: str) -> MovieBuilder:
        self._division = division
        return self

    def build(self) -> Movie:
        return Movie(
            title=self._title,
            year=self._year,
            genre=self._genre,
            division=self._division,
        )


class Program:
    """The television program: channels and their movie, in listing order."""

    __slots__ = ("_content",)

    def __init__(self, entries: Iterable[tuple[Channel, Movie]] = ()) -> None:
        self._content: list[tuple[Channel, Movie]] = list(entries)

    def add(self, channel: Channel, movie: Movie) -> None:
        """Append a channel and its movie to the program."""
        self._content.append((channel, movie))

    def __getitem__(self, index: int) -> tuple[Channel, Movie]:
        return self._content[index]

    def __iter__(self) -> Iterator[tuple[Channel, Movie]]:
        return iter(self._content)

    def __len__(self) -> int:
        return len(self._content)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return self._content == other._content

    def __repr__(self) -> str:
        return f"<Program(entries={len(self._content)})>"


__all__ = ["Channel", "Movie", "MovieBuilder", "Program"]
