"""Pytest fixtures: environment isolation and a default config."""

import pytest

from az_function.shared.config import AirtableConfig

ENV_VARS = [
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_TABLE_ID",
    "AIRTABLE_FILTER",
    "AIRTABLE_SORT_FIELD",
    "AIRTABLE_SORT_DIRECTION",
    "AIRTABLE_PAGE_SIZE",
    "AIRTABLE_MAX_PAGES",
    "AIRTABLE_TIMEOUT_SECONDS",
    "AIRTABLE_API_URL",
    "DEBUG_ERRORS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def airtable_env(monkeypatch):
    monkeypatch.setenv("AIRTABLE_API_KEY", "patTestKey")
    monkeypatch.setenv("AIRTABLE_BASE_ID", "appTestBase")


@pytest.fixture
def config():
    return AirtableConfig(api_key="patTestKey", base_id="appTestBase")
