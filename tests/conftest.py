"""
Test Configuration
==================

Pytest fixtures and test configuration for traffic-census.
"""

import pytest


@pytest.fixture
def hourly_lines():
    """Provide a small hour-only traffic log."""
    return [
        "08:15 L1 5",
        "08:20 L2 3",
        "08:30 L1 2",
    ]


@pytest.fixture
def daily_lines():
    """Provide a small traffic log with dates."""
    return [
        "2024-03-01 08:15 L1 5",
        "2024-03-01 08:40 L2 9",
        "2024-03-02 08:10 L1 4",
        "2024-03-02 17:55 L3 1",
    ]


@pytest.fixture
def mixed_lines():
    """Provide a log with a light ("L9") split across two halves."""
    return [
        "17:05 L9 4",
        "17:10 L1 2",
        "18:00 L2 8",
        "17:20 L9 6",
        "17:25 L3 1",
        "18:30 L2 1",
    ]


@pytest.fixture
def traffic_file(tmp_path, hourly_lines):
    """Write the hour-only log to disk, with blank lines mixed in."""
    path = tmp_path / "traffic.log"
    path.write_text("\n".join([hourly_lines[0], "", hourly_lines[1], "   ", hourly_lines[2]]) + "\n")
    return path


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TRAFFIC_CENSUS_* overrides from the environment."""
    import os

    for name in list(os.environ):
        if name.startswith("TRAFFIC_CENSUS_"):
            monkeypatch.delenv(name)
    return monkeypatch
