"""Shared fixtures: a throwaway data root and an API client bound to it."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.main import app
from config.settings import Settings, get_settings


def write_csv(path: Path, header: str, rows: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    write_csv(
        root / "Sterling_Holidays" / "activities.csv",
        "primary_name,Activity,Type",
        [
            "Sterling Kodai Lake,Board Games,Indoor",
            "Sterling Kodai Lake,Boating,Outdoor",
            "Sterling Ooty Fern Hill,Carrom,Indoor",
        ],
    )
    write_csv(
        root / "Sterling_Holidays" / "dining.csv",
        "primary_name,Restaurant",
        ["Sterling Kodai Lake,Lake View Cafe"],
    )
    return root


@pytest.fixture
def settings(data_root: Path) -> Settings:
    return Settings(data_root=data_root, token_budget=800)


@pytest.fixture
def client(settings: Settings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
