"""
Global pytest configuration for css_split tests.

Keeps library logging off the console while tests run and restores it after
tests that reconfigure it (the CLI does).
"""

import pytest

from css_split.logging_config import configure_logging, LogLevel


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route css_split logs to pytest's capture only."""
    configure_logging(level=LogLevel.DEBUG, console_output=False, file_output=False)
    yield
    configure_logging(level=LogLevel.DEBUG, console_output=False, file_output=False)
