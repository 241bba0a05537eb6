"""Shared test fixtures and utilities."""

from typing import Any, Dict, List, Optional

import pytest

from cloud_profile.environment import Environment
from cloud_profile.models import AuthConfig, TenantInfo
from cloud_profile.parameters import ENDPOINT_PARAMETERS


@pytest.fixture(autouse=True)
def clean_endpoint_env(monkeypatch):
    """Remove endpoint override variables so host settings never leak into tests."""
    for param in ENDPOINT_PARAMETERS:
        monkeypatch.delenv(param.environment_variable, raising=False)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the profile home at a temp directory."""
    home = tmp_path / "profile"
    home.mkdir()
    monkeypatch.setenv("CLOUD_PROFILE_HOME", str(home))
    return home


@pytest.fixture
def custom_env():
    """A partially populated custom environment."""
    return Environment("Contoso", {
        "portalUrl": "https://portal.contoso.test/?LinkId=1",
        "activeDirectoryEndpointUrl": "https://login.contoso.test",
        "activeDirectoryResourceId": "https://management.contoso.test/",
        "commonTenantName": "common",
        "managementEndpointUrl": "https://management.contoso.test",
    })


class FakeBackend:
    """In-memory AccountBackend recording every call."""

    def __init__(
        self,
        subscriptions: Optional[List[Dict[str, Any]]] = None,
        token: Any = "token",
        token_error: Optional[Exception] = None,
        lookup_error: Optional[Exception] = None,
    ):
        self.subscriptions = subscriptions or []
        self.token = token
        self.token_error = token_error
        self.lookup_error = lookup_error
        self.calls: List[tuple] = []

    def normalize_user_name(self, raw: str) -> str:
        return raw.strip().lower()

    async def acquire_service_principal_token(self, auth_config: AuthConfig, client_id: str, secret: str):
        self.calls.append(("acquire_service_principal_token", auth_config, client_id, secret))
        if self.token_error:
            raise self.token_error
        return self.token

    async def acquire_token(self, auth_config: AuthConfig, username: str, password: str):
        self.calls.append(("acquire_token", auth_config, username, password))
        if self.token_error:
            raise self.token_error
        return self.token

    async def get_subscriptions(self, environment, username, password, tenant):
        self.calls.append(("get_subscriptions", environment, username, password, tenant))
        if self.lookup_error:
            raise self.lookup_error
        return list(self.subscriptions)

    async def get_subscriptions_from_tenants(self, environment, username, tenant_infos: List[TenantInfo]):
        self.calls.append(("get_subscriptions_from_tenants", environment, username, tenant_infos))
        if self.lookup_error:
            raise self.lookup_error
        return list(self.subscriptions)

    def called(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fake_backend():
    """Factory fixture building FakeBackend instances."""
    def _make(**kwargs):
        return FakeBackend(**kwargs)
    return _make
