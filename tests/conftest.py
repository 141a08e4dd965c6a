"""Pytest configuration and shared fixtures.

This module contains pytest configuration and shared fixtures used
across all test files.
"""

import pytest

import tablelayout.config as config_module
from tablelayout.render.renderer import PageSize
from tests.fixtures.table_builders import FixedWidthMeasurer, RecordingRenderer


@pytest.fixture(autouse=True)
def reset_config():
    """Reset the global configuration before and after each test.

    Tests that patch environment variables then see a freshly loaded
    configuration instead of one cached by an earlier test.
    """
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    """Create a measurer with a 5pt advance per character."""
    return FixedWidthMeasurer()


@pytest.fixture
def page_size() -> PageSize:
    """Create a page large enough for small tables."""
    return PageSize(width=400.0, height=800.0)


@pytest.fixture
def small_page() -> PageSize:
    """Create a page that holds only a few rows."""
    return PageSize(width=200.0, height=100.0)


@pytest.fixture
def recording_renderer(page_size: PageSize) -> RecordingRenderer:
    """Create a recording renderer on the large page."""
    return RecordingRenderer(page_size)
