"""Unit tests for source listing and schema lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from resort.catalog import get_schema, list_sources, parse_header
from resort.errors import InvalidArgument, NotFound

from tests.conftest import write_csv


class TestListSources:
    def test_lists_csv_stems(self, data_root: Path):
        assert sorted(list_sources(data_root, "Sterling_Holidays")) == ["activities", "dining"]

    def test_ignores_other_files_and_directories(self, data_root: Path):
        resort = data_root / "Sterling_Holidays"
        (resort / "notes.txt").write_text("x")
        (resort / "archive.csv").mkdir()
        write_csv(resort / "nested" / "spa.csv", "a", ["1"])

        assert sorted(list_sources(data_root, "Sterling_Holidays")) == ["activities", "dining"]

    def test_bare_extension_file_is_empty_source(self, data_root: Path):
        (data_root / "Sterling_Holidays" / ".csv").write_text("a\n")

        assert sorted(list_sources(data_root, "Sterling_Holidays")) == ["", "activities", "dining"]

    def test_missing_resort(self, data_root: Path):
        with pytest.raises(NotFound):
            list_sources(data_root, "Unknown_Resort")

    def test_resort_outside_data_root(self, data_root: Path):
        with pytest.raises(NotFound):
            list_sources(data_root, "..")

    def test_resort_required(self, data_root: Path):
        with pytest.raises(InvalidArgument):
            list_sources(data_root, "")


class TestParseHeader:
    def test_strips_whitespace_and_quotes(self):
        assert parse_header('Name, "Type", Price') == ["Name", "Type", "Price"]

    def test_only_one_pair_of_quotes_removed(self):
        assert parse_header('""Name""') == ['"Name"']

    def test_blank_line(self):
        assert parse_header("") == []


class TestGetSchema:
    def test_reads_first_line(self, data_root: Path):
        assert get_schema(data_root, "Sterling_Holidays", "activities") == [
            "primary_name",
            "Activity",
            "Type",
        ]

    def test_quoted_header(self, data_root: Path):
        write_csv(data_root / "Sterling_Holidays" / "rooms.csv", 'Name, "Type", Price', ["a,b,c"])

        assert get_schema(data_root, "Sterling_Holidays", "rooms") == ["Name", "Type", "Price"]

    def test_hyphenated_file_fallback(self, data_root: Path):
        write_csv(data_root / "Sterling_Holidays" / "room-types.csv", "Room,Beds", [])

        assert get_schema(data_root, "Sterling_Holidays", "room_types") == ["Room", "Beds"]

    def test_exact_name_wins(self, data_root: Path):
        write_csv(data_root / "Sterling_Holidays" / "room_types.csv", "Exact", [])
        write_csv(data_root / "Sterling_Holidays" / "room-types.csv", "Hyphen", [])

        assert get_schema(data_root, "Sterling_Holidays", "room_types") == ["Exact"]

    def test_byte_order_mark_ignored(self, data_root: Path):
        path = data_root / "Sterling_Holidays" / "spa.csv"
        path.write_text("\ufeffTreatment,Price\n", encoding="utf-8")

        assert get_schema(data_root, "Sterling_Holidays", "spa") == ["Treatment", "Price"]

    def test_empty_file(self, data_root: Path):
        (data_root / "Sterling_Holidays" / "empty.csv").write_text("")

        assert get_schema(data_root, "Sterling_Holidays", "empty") == []

    def test_missing_source(self, data_root: Path):
        with pytest.raises(NotFound):
            get_schema(data_root, "Sterling_Holidays", "golf")
