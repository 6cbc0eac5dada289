"""
Filter File Service

Reads and writes the program filter as a headerless CSV file with one
`tag,value` record per line, and keeps the loaded filter together with its
path for best-effort persistence.
"""
from __future__ import annotations

import asyncio
import csv
import io
import logging
from collections.abc import Sequence
from pathlib import Path

import aiofiles
import aiofiles.os

from tvlisting.config import settings
from tvlisting.errors import ParsingFileError
from tvlisting.filters import (
    FilterType,
    ProgramFilter,
    program_filter_from_records,
    program_filter_to_records,
)


logger = logging.getLogger(__name__)


def parse_records(content: str) -> list[list[str]]:
    """
    Split CSV text into two-field records

    Blank lines are skipped.

    Raises:
        ParsingFileError: If a line does not have exactly two fields
    """
    records = []
    try:
        for line_number, row in enumerate(csv.reader(io.StringIO(content, newline="")), start=1):
            if not row:
                continue
            if len(row) != 2:
                raise ParsingFileError(
                    f"Line {line_number} has {len(row)} fields, expected 2"
                )
            records.append(row)
    except csv.Error as e:
        raise ParsingFileError(f"Malformed filter file: {e}") from e
    return records


def format_records(records: Sequence[Sequence[str]]) -> str:
    """Render records as CSV text, quoting values that contain separators"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(records)
    return buffer.getvalue()


async def read_filter_file(path: Path | str) -> ProgramFilter:
    """
    Read a program filter from a file

    Args:
        path: Path to the filter file

    Returns:
        The decoded ProgramFilter

    Raises:
        ParsingFileError: If the file cannot be read or any record is invalid
    """
    path = Path(path)
    logger.debug(f"Reading filter file: {path}")

    try:
        async with aiofiles.open(path, "r", encoding="utf-8", newline="") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ParsingFileError(f"Cannot read filter file {path}: {e}") from e

    program_filter = program_filter_from_records(parse_records(content))
    logger.debug(f"Loaded {program_filter!r} from {path}")
    return program_filter


async def write_filter_file(path: Path | str, program_filter: ProgramFilter) -> None:
    """
    Write a program filter to a file, replacing its previous content

    All records are serialized before the file is touched. The content goes
    to a sibling temporary file which then replaces the target, so readers
    never see a truncated file.

    Args:
        path: Path to the filter file
        program_filter: Filter to write

    Raises:
        ParsingFileError: If the filter cannot be serialized or the file cannot be written
    """
    path = Path(path)
    content = format_records(program_filter_to_records(program_filter))
    temp_path = path.with_name(f"{path.name}.tmp")

    try:
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(temp_path, "w", encoding="utf-8", newline="") as f:
            await f.write(content)
            await f.flush()
        await aiofiles.os.replace(temp_path, path)
    except OSError as e:
        _cleanup_temp_file(temp_path)
        raise ParsingFileError(f"Cannot write filter file {path}: {e}") from e

    logger.debug(f"Wrote {program_filter!r} to {path}")


def _cleanup_temp_file(file_path: Path) -> bool:
    """
    Safely delete a leftover temporary file

    Returns:
        True if deleted successfully, False otherwise
    """
    if not file_path.exists():
        return False

    try:
        file_path.unlink()
        logger.debug(f"Cleaned up temporary file: {file_path}")
        return True
    except OSError as e:
        logger.warning(f"Failed to delete temporary file {file_path}: {e}")
        return False


class FilterStore:
    """
    Owns the user's program filter and the file it is persisted to.

    Writes are serialized by an internal asyncio.Lock. The filter itself is
    meant to be mutated by one owner only.
    """

    def __init__(self, path: Path | str | None = None):
        """Initialize the store with an empty filter."""
        self.path = Path(path or settings.filter_file_path)
        self.program_filter = ProgramFilter()
        self._write_lock = asyncio.Lock()

    async def load(self) -> ProgramFilter:
        """
        Load the filter from disk.

        A missing file yields an empty filter. A file that cannot be parsed is
        logged and also yields an empty filter.

        Returns:
            The loaded filter, also kept as `program_filter`
        """
        if not await aiofiles.os.path.exists(self.path):
            logger.info("No filter file at %s, starting with an empty filter", self.path)
            self.program_filter = ProgramFilter()
            return self.program_filter

        try:
            self.program_filter = await read_filter_file(self.path)
        except ParsingFileError as exc:
            logger.warning("Ignoring unreadable filter file %s: %s", self.path, exc)
            self.program_filter = ProgramFilter()
        else:
            logger.info(
                "Loaded %s channel and %s movie filters from %s",
                len(self.program_filter.channel_filters),
                len(self.program_filter.movie_filters),
                self.path,
            )
        return self.program_filter

    async def persist(self) -> None:
        """
        Write the current filter to disk.

        Raises:
            ParsingFileError: If writing fails
        """
        async with self._write_lock:
            await write_filter_file(self.path, self.program_filter.copy())

    async def add(self, attribute: FilterType) -> bool:
        """
        Add a rule and persist the filter.

        Persisting is best-effort: a failure is logged and the rule stays
        active in memory.

        Returns:
            True if the filter was written, False otherwise
        """
        self.program_filter.add(attribute)
        try:
            await self.persist()
        except ParsingFileError as exc:
            logger.warning("Could not persist filters to %s: %s", self.path, exc)
            return False
        return True
