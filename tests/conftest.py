"""Pytest configuration and shared fixtures for graphql-client-core tests."""

import httpx
import pytest

from graphql_client_core.testing import RecordingHandler, make_settings


@pytest.fixture
def settings():
    """Settings pointing at example URLs, with instant retries."""
    return make_settings()


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def http_client(handler):
    """Plain client over the recording handler, no retries."""
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        yield client
