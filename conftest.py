from datetime import datetime

import pytest

from library_catalog.catalog import Catalog, counter_ids
from library_catalog.ui_helpers import OUTPUT_MODE_ENV

FIXED_NOW = datetime(2025, 1, 1, 9, 30)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # The CLI's --output option writes to the environment; restore it after each test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def catalog():
    # Counter ids and a fixed clock keep every test deterministic
    return Catalog(id_factory=counter_ids(), clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_now():
    return FIXED_NOW
