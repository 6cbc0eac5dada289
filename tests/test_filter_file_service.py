"""
Tests for reading and writing the filter file.
"""

import pytest

from tvlisting.errors import ParsingFileError
from tvlisting.filters import ChannelAttribute, MovieAttribute, ProgramFilter
from tvlisting.models import Channel, Movie
from tvlisting.services.filter_file_service import (
    FilterStore,
    format_records,
    parse_records,
    read_filter_file,
    write_filter_file,
)


class TestRecordText:
    """Test cases for the CSV record codec."""

    def test_parse_plain_lines(self):
        assert parse_records("name,ZDF\ntitle,Tagesschau\n") == [
            ["name", "ZDF"],
            ["title", "Tagesschau"],
        ]

    def test_blank_lines_are_skipped(self):
        assert parse_records("\nname,ZDF\n\n") == [["name", "ZDF"]]

    def test_empty_content(self):
        assert parse_records("") == []

    @pytest.mark.parametrize("content", ["name\n", "name,ZDF,ARD\n", "name,ZDF\ntitle\n"])
    def test_wrong_field_count_fails(self, content):
        with pytest.raises(ParsingFileError):
            parse_records(content)

    def test_values_with_separators_are_quoted(self):
        content = format_records([["title", 'Tatort, "Der Fall"']])

        assert content == 'title,"Tatort, ""Der Fall"""\n'
        assert parse_records(content) == [["title", 'Tatort, "Der Fall"']]


class TestFilterFile:
    """Test cases for filter file read/write."""

    @pytest.mark.asyncio
    async def test_scenario_file_filters_program(self, tmp_path, sample_program):
        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\ntitle,Tagesschau\n", encoding="utf-8")

        program_filter = await read_filter_file(path)

        assert list(program_filter.filter(sample_program)) == [
            (Channel("ARD"), Movie("Heute")),
        ]

    @pytest.mark.asyncio
    async def test_write_emits_channel_records_first(self, tmp_path):
        path = tmp_path / "filters.csv"
        program_filter = ProgramFilter()
        program_filter.add(MovieAttribute.title("Tagesschau"))
        program_filter.add(ChannelAttribute.name("ZDF"))

        await write_filter_file(path, program_filter)

        assert path.read_text(encoding="utf-8") == "name,ZDF\ntitle,Tagesschau\n"

    @pytest.mark.asyncio
    async def test_write_then_read(self, tmp_path):
        path = tmp_path / "nested" / "filters.csv"
        program_filter = ProgramFilter()
        program_filter.add(ChannelAttribute.name("SAT.1 Gold"))
        program_filter.add(MovieAttribute.genre("Doku-Soap"))
        program_filter.add(MovieAttribute.division("Serie"))
        program_filter.add(MovieAttribute.title("Köln 50667, Folge 1"))

        await write_filter_file(path, program_filter)

        assert await read_filter_file(path) == program_filter
        assert not (tmp_path / "nested" / "filters.csv.tmp").exists()

    @pytest.mark.asyncio
    async def test_write_truncates_previous_content(self, tmp_path):
        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\nname,ARD\ntitle,Heute\n", encoding="utf-8")
        program_filter = ProgramFilter()
        program_filter.add(ChannelAttribute.name("RTL"))

        await write_filter_file(path, program_filter)

        assert path.read_text(encoding="utf-8") == "name,RTL\n"

    @pytest.mark.asyncio
    async def test_failed_serialization_keeps_existing_file(self, tmp_path):
        class AnyChannel:
            def matches(self, channel):
                return True

        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\n", encoding="utf-8")
        program_filter = ProgramFilter()
        program_filter.add(ChannelAttribute.name("ARD"))
        program_filter.add_channel_filter(AnyChannel())

        with pytest.raises(ParsingFileError):
            await write_filter_file(path, program_filter)

        assert path.read_text(encoding="utf-8") == "name,ZDF\n"

    @pytest.mark.asyncio
    async def test_read_missing_file_fails(self, tmp_path):
        with pytest.raises(ParsingFileError):
            await read_filter_file(tmp_path / "missing.csv")

    @pytest.mark.asyncio
    async def test_read_unknown_tag_fails(self, tmp_path):
        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\nchannel,ARD\n", encoding="utf-8")

        with pytest.raises(ParsingFileError):
            await read_filter_file(path)

    @pytest.mark.asyncio
    async def test_write_to_unusable_path_fails(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ParsingFileError):
            await write_filter_file(blocker / "filters.csv", ProgramFilter())


class TestFilterStore:
    """Test cases for FilterStore."""

    @pytest.mark.asyncio
    async def test_load_missing_file_gives_empty_filter(self, tmp_path):
        store = FilterStore(tmp_path / "filters.csv")

        program_filter = await store.load()

        assert program_filter == ProgramFilter()
        assert store.program_filter is program_filter

    @pytest.mark.asyncio
    async def test_load_corrupt_file_gives_empty_filter(self, tmp_path):
        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\ngarbage\n", encoding="utf-8")
        store = FilterStore(path)

        assert await store.load() == ProgramFilter()

    @pytest.mark.asyncio
    async def test_load_existing_file(self, tmp_path):
        path = tmp_path / "filters.csv"
        path.write_text("name,ZDF\ngenre,Krimi\n", encoding="utf-8")
        store = FilterStore(path)

        program_filter = await store.load()

        assert program_filter.matches((Channel("ZDF"), Movie("Heute")))
        assert program_filter.matches((Channel("ARD"), Movie("Tatort", genre="Krimi")))

    @pytest.mark.asyncio
    async def test_add_persists_immediately(self, tmp_path):
        path = tmp_path / "filters.csv"
        store = FilterStore(path)
        await store.load()

        assert await store.add(MovieAttribute.title("Tagesschau"))
        assert await store.add(ChannelAttribute.name("ZDF"))

        assert path.read_text(encoding="utf-8") == "name,ZDF\ntitle,Tagesschau\n"

    @pytest.mark.asyncio
    async def test_add_keeps_rule_when_persist_fails(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = FilterStore(blocker / "filters.csv")

        persisted = await store.add(ChannelAttribute.name("ZDF"))

        assert persisted is False
        assert store.program_filter.matches((Channel("ZDF"), Movie("Heute")))
