"""Shared fixtures for keep tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from keep.server.app import create_app
from keep.server.settings import KeepServerSettings
from shared.auth.settings import AuthSettings
from shared.tests.helpers import client_factory_for, make_auth_mock, provider_user

TEST_APP_URL = "http://localhost:8710"


@pytest.fixture
def auth_settings():
    return AuthSettings(provider_url="http://provider", provider_key="test-anon-key", app_url=TEST_APP_URL)


@pytest.fixture
def auth():
    """Provider auth client for an anonymous visitor."""
    return make_auth_mock()


@pytest.fixture
def signed_in_auth():
    """Provider auth client for a visitor holding a valid session."""
    return make_auth_mock(user=provider_user())


@pytest.fixture
def make_client(auth_settings):
    def _make(auth_mock) -> TestClient:
        app = create_app(
            settings=KeepServerSettings(),
            auth_settings=auth_settings,
            client_factory=client_factory_for(auth_mock),
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, auth):
    return make_client(auth)


@pytest.fixture
def signed_in_client(make_client, signed_in_auth):
    return make_client(signed_in_auth)
