"""Shared fixtures for use case tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def writer() -> MagicMock:
    """Ledger writer double handed out by the unit of work."""
    writer = MagicMock()
    writer.fetch_commodities.return_value = []
    return writer


@pytest.fixture
def unit_of_work(writer) -> MagicMock:
    unit_of_work = MagicMock()
    unit_of_work.begin.return_value.__enter__.return_value = writer
    return unit_of_work
