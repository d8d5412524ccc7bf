# tests/event_engine/conftest.py
"""Pytest configuration and shared fixtures for event_engine tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure quakeview package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def make_row(
    row_id: str,
    *,
    time: str = "2024-03-05T10:15:00.000Z",
    latitude: str = "0",
    longitude: str = "0",
    depth: str = "10",
    mag: str = "1.0",
    place: str = "Somewhere",
    type: str = "earthquake",
) -> dict[str, str]:
    """Raw feed row with the USGS column names."""
    return {
        "id": row_id,
        "time": time,
        "latitude": latitude,
        "longitude": longitude,
        "depth": depth,
        "mag": mag,
        "place": place,
        "type": type,
    }


@pytest.fixture
def scenario_rows():
    """Three rows: A (M5.0 Nevada), B (M2.0 France), C (M6.5 Nevada quarry blast)."""
    return [
        make_row("A", time="2024-03-05T10:15:00.000Z", latitude="39.5", longitude="-119.8",
                 depth="10", mag="5.0", place="10 km N of Reno, Nevada"),
        make_row("B", time="2024-04-05T23:30:00.000Z", latitude="48.8", longitude="2.3",
                 depth="30", mag="2.0", place="5 km S of Paris, France"),
        make_row("C", time="2023-03-17T01:00:00.000Z", latitude="38.0", longitude="-117.0",
                 depth="5", mag="6.5", place="Elsewhere, Nevada", type="quarry blast"),
    ]


@pytest.fixture
def scenario_events(scenario_rows):
    from quakeview.event_engine.normalizer import normalize_rows

    return normalize_rows(scenario_rows)


@pytest.fixture
def depth_events():
    """Eleven events with depths 0, 1, ..., 10 (ids d0..d10)."""
    from quakeview.event_engine.normalizer import normalize_row

    return [normalize_row(make_row(f"d{i}", depth=str(i))) for i in range(11)]


@pytest.fixture
def row_factory():
    """make_row() as a fixture, for tests that build their own rows."""
    return make_row
