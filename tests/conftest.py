"""Shared pytest fixtures for Nuggt tests."""

from pathlib import Path

import pytest


@pytest.fixture
def dashboard_source() -> str:
    """Return a small document mixing prose, elements and a grid."""
    return (
        "# Dashboard\n"
        "card: (title: Revenue, content:  Up 4%)\n"
        "[3]: { [2]: line-chart: (series: sales), button: [(label: Refresh), prompt: Refresh] }\n"
        "[3]: { [2]: continue, input: [(placeholder: Email), emailId] }\n"
    )


@pytest.fixture
def dsl_file(tmp_path: Path, dashboard_source: str) -> Path:
    """Write the dashboard document to a temporary file."""
    path = tmp_path / "screen.nuggt"
    path.write_text(dashboard_source, encoding="utf-8")
    return path
