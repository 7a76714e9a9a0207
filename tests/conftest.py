"""Shared pytest fixtures for all tests

This module provides common fixtures used across unit and integration tests.
"""
import base64
import os
import tempfile

import pytest
import respx
from fastapi.testclient import TestClient

from x_oauth.config import XConfig

CLIENT_ID = "test_client_id"
REDIRECT_URI = "http://localhost:5173/callback"

# Smallest valid images of each allowed type
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 24


def data_url(content: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def x_config():
    """Public client configuration pointing at the real X endpoints"""
    return XConfig(client_id=CLIENT_ID, redirect_uri=REDIRECT_URI)


@pytest.fixture
def confidential_config():
    """Confidential client configuration (HTTP Basic on token calls)"""
    return XConfig(client_id=CLIENT_ID, redirect_uri=REDIRECT_URI, client_secret="test_secret")


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def temp_token_file():
    """Path inside a temporary directory for a token file"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield os.path.join(temp_dir, "x-publisher", "tokens.json")


@pytest.fixture
def token_storage(temp_token_file):
    """TokenStorage backed by a temporary file"""
    from utils.storage import TokenStorage

    return TokenStorage(token_file=temp_token_file)


@pytest.fixture
def mock_x_api():
    """Mock every outgoing httpx request using respx"""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def fastapi_test_client(x_config, recording_sleep):
    """FastAPI TestClient wired to the test XConfig and a non-waiting retry sleep"""
    from publisher import PublishPipeline
    from server.app import create_app
    from server.dependencies import get_publish_pipeline, get_x_config

    app = create_app(allowed_origins=["http://localhost:5173"])
    app.dependency_overrides[get_x_config] = lambda: x_config
    app.dependency_overrides[get_publish_pipeline] = lambda: PublishPipeline(x_config, sleep=recording_sleep)

    with TestClient(app) as client:
        yield client


# Markers for convenience
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use TestClient)"
    )
