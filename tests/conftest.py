"""
Pytest configuration.

Registers the integration marker / --run-integration option and provides
shared fixtures for the invoice assistant tests.
"""

import pytest

from invoice_assistant.api.deps import get_config, get_store
from invoice_assistant.api.main import app
from invoice_assistant.services.config_provider import ConfigProvider
from invoice_assistant.services.storage.record_store import RecordStore
from invoice_assistant.services.storage.settings_store import InMemorySettingsStore
from tests.helpers import TEST_API_KEY


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real Gemini API"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring a real Gemini API key"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def store():
    """Fresh record store, also wired into the API"""
    fresh = RecordStore()
    app.dependency_overrides[get_store] = lambda: fresh
    yield fresh
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def config():
    """Config provider with a test credential, also wired into the API"""
    provider = ConfigProvider(InMemorySettingsStore(), default_credential=TEST_API_KEY)
    app.dependency_overrides[get_config] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_config, None)
