"""Root conftest — shared test configuration."""

import os

import pytest

# Ensure tests never need real Azure ids
os.environ.setdefault("AZURE_TENANT_ID", "tenant-test")
os.environ.setdefault("AZURE_CLIENT_ID", "client-test")
os.environ.setdefault("AZURE_SUBSCRIPTION_ID", "sub-123")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    from snapshot_api.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
