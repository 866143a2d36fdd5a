"""Pytest configuration and shared fixtures for webclip tests."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from webclip.config import WebclipSettings, get_settings
from webclip.services.converter import MarkdownConverter


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure logic tests with no I/O")
    config.addinivalue_line("markers", "integration: Tests that touch the filesystem or run CLI commands in-process")
    config.addinivalue_line("markers", "e2e: End-to-end tests that run the installed CLI in a subprocess")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Apply default markers to tests without explicit markers.

    Tests should use explicit markers (@pytest.mark.integration, @pytest.mark.e2e).
    Unmarked tests default to unit.
    """
    for item in items:
        # Skip if already has a category marker
        marker_names = [m.name for m in item.iter_markers()]
        if any(m in marker_names for m in ("unit", "integration", "e2e")):
            continue

        # Default unmarked tests to unit
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep WEBCLIP_* variables from the developer's shell out of tests and reset cached settings."""
    for name in list(os.environ):
        if name.startswith("WEBCLIP_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def converter() -> MarkdownConverter:
    """Converter with default settings."""
    return MarkdownConverter()


@pytest.fixture
def settings() -> WebclipSettings:
    """Settings built from defaults only, ignoring any .env file."""
    return WebclipSettings(_env_file=None)


@pytest.fixture
def html_file(tmp_path: Path) -> Path:
    """Write a small selection fragment to disk.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        Path to the HTML file.
    """
    path = tmp_path / "selection.html"
    path.write_text(
        '<p>Read the <a href="/docs">docs</a> first.</p><ul><li>One</li><li>Two</li></ul>',
        encoding="utf-8",
    )
    return path
