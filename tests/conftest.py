"""
Pytest configuration.

Registers the integration marker, the --run-integration option, and shared
fixtures for talking to a mocked extraction service.
"""

import pytest
from src.core.config import settings
from src.services.gemini import generate_content_url
from src.services.storage import session_store


SAMPLE_MARKDOWN = (
    "| 編號 | 名稱 |\n"
    "|---|---|\n"
    "| IM250001 | 測試案, A |"
)


def gemini_body(text: str) -> dict:
    """A generateContent response carrying the given answer text"""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real extraction model"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring a real model endpoint"
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
def llm_configured():
    """Point the client at a fake credential so requests reach the (mocked) endpoint"""
    original_key = settings.llm_api_key
    settings.llm_api_key = "test-key"
    try:
        yield settings
    finally:
        settings.llm_api_key = original_key


@pytest.fixture
def gemini_url():
    return generate_content_url()


@pytest.fixture(autouse=True)
def clear_sessions():
    session_store.clear()
    yield
    session_store.clear()
