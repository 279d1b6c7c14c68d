"""Reads per-resort CSV sources from the data root.

Layout: ``<data_root>/<resort>/<source>.csv``, one directory per resort and one
file per source directly inside it.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Optional

from resort.chunker import Record
from resort.errors import NotFound


CSV_SUFFIX = ".csv"


def _inside(root: Path, candidate: Path) -> bool:
    try:
        candidate.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def resort_dir(data_root: Path, resort: str) -> Path:
    """Return the resort's directory or raise NotFound."""
    path = data_root / resort
    if not _inside(data_root, path) or not path.is_dir():
        raise NotFound(f"Directory not found: {resort}")
    return path


def find_source(data_root: Path, resort: str, source: str) -> Optional[Path]:
    path = data_root / resort / f"{source}{CSV_SUFFIX}"
    if _inside(data_root, path) and path.is_file():
        return path
    return None


def source_path(data_root: Path, resort: str, source: str) -> Path:
    path = find_source(data_root, resort, source)
    if path is None:
        raise NotFound(f"File not found: {source}{CSV_SUFFIX}")
    return path


def load_records(path: Path) -> List[Record]:
    """Load every row of a CSV file as a column -> string mapping."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        # Short rows get "" rather than None so every value stays a string.
        return [
            {key: (value if value is not None else "") for key, value in row.items() if key is not None}
            for row in reader
        ]


def read_header_line(path: Path) -> str:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return f.readline().rstrip("\r\n")
