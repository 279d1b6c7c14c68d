"""Lists a resort's sources and reads a source's column headers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from resort.csv_source import CSV_SUFFIX, find_source, read_header_line, resort_dir
from resort.errors import InvalidArgument, NotFound


# Older exports name files with hyphens where the source name has underscores.
SOURCE_NAME_CANDIDATES: List[Callable[[str], str]] = [
    lambda name: name,
    lambda name: name.replace("_", "-"),
]


def list_sources(data_root: Path, resort: Optional[str]) -> List[str]:
    if not resort:
        raise InvalidArgument("Primary name is required")
    directory = resort_dir(data_root, resort)
    return sorted(
        path.name[: -len(CSV_SUFFIX)]
        for path in directory.iterdir()
        if path.is_file() and path.name.endswith(CSV_SUFFIX)
    )


def _clean_header(field: str) -> str:
    field = field.strip()
    if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
        field = field[1:-1]
    return field


def parse_header(line: str) -> List[str]:
    """Split a header line on commas, trimming whitespace and one pair of quotes.

    Commas inside quoted header names are not supported.
    """
    if not line.strip():
        return []
    return [_clean_header(field) for field in line.split(",")]


def get_schema(data_root: Path, resort: Optional[str], source: Optional[str]) -> List[str]:
    if not resort or not source:
        raise InvalidArgument("Primary name and source are required")

    for transform in SOURCE_NAME_CANDIDATES:
        path = find_source(data_root, resort, transform(source))
        if path is not None:
            return parse_header(read_header_line(path))

    raise NotFound(f"File not found: {source}{CSV_SUFFIX}")
