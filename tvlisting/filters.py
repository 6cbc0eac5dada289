"""
Attribute filters for hiding schedule entries.

A filter rule is an attribute predicate: one field of one entity kind tested
for exact string equality. Rules are grouped per entity kind in a `Filters`
collection (logical OR) and both groups are combined in `ProgramFilter`.

Rules are persisted as two-field records `[tag, value]`. Channel tags and
movie tags are disjoint; channel records are always emitted first.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar

from tvlisting.errors import ParsingFileError
from tvlisting.models import Channel, Movie, Program


logger = logging.getLogger(__name__)

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

Record = Sequence[str]


class Predicate(Protocol[T_contra]):
    """Anything that can decide whether an item matches."""

    def matches(self, item: T_contra) -> bool: ...


class ChannelAttributeKind(str, Enum):
    NAME = "name"


class MovieAttributeKind(str, Enum):
    TITLE = "title"
    GENRE = "genre"
    DIVISION = "division"


def _split_record(record: Record) -> tuple[str, str]:
    if len(record) != 2:
        raise ParsingFileError(f"Filter record must have 2 fields, got {len(record)}")
    return record[0], record[1]


@dataclass(frozen=True, slots=True)
class ChannelAttribute:
    """Filter rule on a channel field"""
    kind: ChannelAttributeKind
    value: str

    @classmethod
    def name(cls, value: str) -> ChannelAttribute:
        return cls(ChannelAttributeKind.NAME, value)

    @classmethod
    def name_of(cls, channel: Channel) -> ChannelAttribute:
        """Rule hiding every entry on the given channel."""
        return cls.name(channel.name)

    def matches(self, channel: Channel) -> bool:
        if self.kind is ChannelAttributeKind.NAME:
            return self.value == channel.name
        return False

    def to_record(self) -> list[str]:
        return [self.kind.value, self.value]

    @classmethod
    def from_record(cls, record: Record) -> ChannelAttribute | None:
        """Decode a record, or return None if the tag is not a channel tag."""
        tag, value = _split_record(record)
        try:
            kind = ChannelAttributeKind(tag)
        except ValueError:
            return None
        return cls(kind, value)


@dataclass(frozen=True, slots=True)
class MovieAttribute:
    """Filter rule on a movie field"""
    kind: MovieAttributeKind
    value: str

    @classmethod
    def title(cls, value: str) -> MovieAttribute:
        return cls(MovieAttributeKind.TITLE, value)

    @classmethod
    def genre(cls, value: str) -> MovieAttribute:
        return cls(MovieAttributeKind.GENRE, value)

    @classmethod
    def division(cls, value: str) -> MovieAttribute:
        return cls(MovieAttributeKind.DIVISION, value)

    @classmethod
    def title_of(cls, movie: Movie) -> MovieAttribute:
        return cls.title(movie.title)

    @classmethod
    def genre_of(cls, movie: Movie) -> MovieAttribute | None:
        """Rule for the movie's genre, None if the movie has no genre."""
        return cls.genre(movie.genre) if movie.genre is not None else None

    @classmethod
    def division_of(cls, movie: Movie) -> MovieAttribute | None:
        """Rule for the movie's division, None if the movie has no division."""
        return cls.division(movie.division) if movie.division is not None else None

    def matches(self, movie: Movie) -> bool:
        # Absent optional fields are None and never equal a rule value
        if self.kind is MovieAttributeKind.TITLE:
            return self.value == movie.title
        if self.kind is MovieAttributeKind.GENRE:
            return self.value == movie.genre
        if self.kind is MovieAttributeKind.DIVISION:
            return self.value == movie.division
        return False

    def to_record(self) -> list[str]:
        return [self.kind.value, self.value]

    @classmethod
    def from_record(cls, record: Record) -> MovieAttribute | None:
        """Decode a record, or return None if the tag is not a movie tag."""
        tag, value = _split_record(record)
        try:
            kind = MovieAttributeKind(tag)
        except ValueError:
            return None
        return cls(kind, value)


FilterType = ChannelAttribute | MovieAttribute


class Filters(Generic[T]):
    """Ordered predicates for one entity kind; an item matches if any predicate does."""

    __slots__ = ("_predicates",)

    def __init__(self, predicates: Sequence[Predicate[T]] = ()) -> None:
        self._predicates: list[Predicate[T]] = list(predicates)

    def add(self, predicate: Predicate[T]) -> None:
        self._predicates.append(predicate)

    def matches(self, item: T) -> bool:
        return any(predicate.matches(item) for predicate in self._predicates)

    def __iter__(self) -> Iterator[Predicate[T]]:
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filters):
            return NotImplemented
        return self._predicates == other._predicates

    def __repr__(self) -> str:
        return f"Filters({self._predicates!r})"


class ProgramFilter:
    """Channel filters and movie filters; an entry is hidden if either matches."""

    __slots__ = ("channel_filters", "movie_filters")

    def __init__(
        self,
        channel_filters: Filters[Channel] | None = None,
        movie_filters: Filters[Movie] | None = None,
    ) -> None:
        self.channel_filters: Filters[Channel] = (
            channel_filters if channel_filters is not None else Filters()
        )
        self.movie_filters: Filters[Movie] = (
            movie_filters if movie_filters is not None else Filters()
        )

    def add(self, attribute: FilterType) -> None:
        """Add a rule to the sub-filter matching its entity kind."""
        if isinstance(attribute, ChannelAttribute):
            self.add_channel_filter(attribute)
        elif isinstance(attribute, MovieAttribute):
            self.add_movie_filter(attribute)
        else:
            raise TypeError(f"Unsupported filter attribute: {attribute!r}")

    def add_channel_filter(self, predicate: Predicate[Channel]) -> None:
        self.channel_filters.add(predicate)

    def add_movie_filter(self, predicate: Predicate[Movie]) -> None:
        self.movie_filters.add(predicate)

    def matches(self, entry: tuple[Channel, Movie]) -> bool:
        channel, movie = entry
        return self.channel_filters.matches(channel) or self.movie_filters.matches(movie)

    def filter(self, program: Program) -> Program:
        """Return a new program without the matching entries, order preserved."""
        return Program(entry for entry in program if not self.matches(entry))

    def copy(self) -> ProgramFilter:
        return ProgramFilter(
            Filters(list(self.channel_filters)),
            Filters(list(self.movie_filters)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProgramFilter):
            return NotImplemented
        return (
            self.channel_filters == other.channel_filters
            and self.movie_filters == other.movie_filters
        )

    def __repr__(self) -> str:
        return (
            f"<ProgramFilter(channel_filters={len(self.channel_filters)}, "
            f"movie_filters={len(self.movie_filters)})>"
        )


def program_filter_to_records(program_filter: ProgramFilter) -> list[list[str]]:
    """
    Serialize a program filter into two-field records.

    Channel records always come before movie records.

    Raises:
        ParsingFileError: If a sub-filter holds a predicate that is not an attribute
    """
    records: list[list[str]] = []
    for predicate in program_filter.channel_filters:
        if not isinstance(predicate, ChannelAttribute):
            raise ParsingFileError(f"Cannot serialize channel predicate {predicate!r}")
        records.append(predicate.to_record())
    for predicate in program_filter.movie_filters:
        if not isinstance(predicate, MovieAttribute):
            raise ParsingFileError(f"Cannot serialize movie predicate {predicate!r}")
        records.append(predicate.to_record())
    return records


def program_filter_from_records(
    records: Sequence[Record],
    *,
    channel_decoder: Callable[[Record], Predicate[Channel] | None] = ChannelAttribute.from_record,
    movie_decoder: Callable[[Record], Predicate[Movie] | None] = MovieAttribute.from_record,
) -> ProgramFilter:
    """
    Build a program filter from two-field records.

    Each record is offered to both decoders and exactly one of them has to
    accept it. The result is in canonical order regardless of record order.

    Args:
        records: Records as read from the filter file
        channel_decoder: Returns a channel predicate or None for foreign tags
        movie_decoder: Returns a movie predicate or None for foreign tags

    Returns:
        The decoded ProgramFilter

    Raises:
        ParsingFileError: On a malformed record, an unknown tag, or a tag
            accepted by both decoders. No partial filter is returned.
    """
    program_filter = ProgramFilter()

    for index, record in enumerate(records):
        channel_predicate = channel_decoder(record)
        movie_predicate = movie_decoder(record)
        tag = record[0] if record else ""

        if channel_predicate is not None and movie_predicate is not None:
            raise ParsingFileError(f"Ambiguous filter tag {tag!r} in record {index}")
        if channel_predicate is not None:
            program_filter.add_channel_filter(channel_predicate)
        elif movie_predicate is not None:
            program_filter.add_movie_filter(movie_predicate)
        else:
            raise ParsingFileError(f"Unknown filter tag {tag!r} in record {index}")

    logger.debug(
        "Decoded %s channel and %s movie filters",
        len(program_filter.channel_filters),
        len(program_filter.movie_filters),
    )
    return program_filter


__all__ = [
    "ChannelAttribute",
    "ChannelAttributeKind",
    "FilterType",
    "Filters",
    "MovieAttribute",
    "MovieAttributeKind",
    "Predicate",
    "ProgramFilter",
    "program_filter_from_records",
    "program_filter_to_records",
]
