"""Tests for Environment parameter resolution, derived values and serialization."""

import json
from unittest.mock import Mock

import pytest

from cloud_profile.constants import DEFAULT_CLIENT_ID
from cloud_profile.environment import Environment, add_realm
from cloud_profile.errors import EndpointNotDefinedError, UnknownParameterError
from cloud_profile.parameters import ENDPOINT_PARAMETERS, PARAMETER_NAMES, Endpoint


class TestConstruction:
    """Test that construction fills defaults and never validates."""

    def test_unsupplied_parameters_default_to_none(self):
        env = Environment("Empty")
        assert set(env.values) == set(PARAMETER_NAMES)
        assert all(v is None for v in env.values.values())

    def test_supplied_values_are_stored(self, custom_env):
        assert custom_env.values["portalUrl"] == "https://portal.contoso.test/?LinkId=1"
        assert custom_env.values["galleryEndpointUrl"] is None

    def test_unknown_keys_are_ignored(self):
        env = Environment("X", {"portalUrl": "https://p", "bogus": "value"})
        assert "bogus" not in env.values

    def test_enum_keys_accepted(self):
        env = Environment("X", {Endpoint.PORTAL_URL: "https://p"})
        assert env.get("portalUrl") == "https://p"

    def test_values_view_is_read_only(self, custom_env):
        with pytest.raises(TypeError):
            custom_env.values["portalUrl"] = "x"

    def test_from_dict_requires_name(self):
        with pytest.raises(ValueError):
            Environment.from_dict({"portalUrl": "https://p"})

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(ValueError):
            Environment.from_dict("just-a-string")

    def test_unhashable(self, custom_env):
        with pytest.raises(TypeError):
            hash(custom_env)


class TestResolution:
    """Test the environment variable > stored value precedence."""

    @pytest.mark.parametrize("param", ENDPOINT_PARAMETERS, ids=lambda p: p.name)
    def test_unset_parameter_fails_on_read(self, param):
        env = Environment("Empty")
        with pytest.raises(EndpointNotDefinedError) as exc_info:
            env.get(param.name)
        assert exc_info.value.parameter == param.name
        assert exc_info.value.environment == "Empty"
        assert param.name in str(exc_info.value)

    @pytest.mark.parametrize("param", ENDPOINT_PARAMETERS, ids=lambda p: p.name)
    def test_set_then_get(self, param):
        env = Environment("Empty")
        env.set(param.name, "x")
        assert env.get(param.name) == "x"

    @pytest.mark.parametrize("param", ENDPOINT_PARAMETERS, ids=lambda p: p.name)
    def test_environment_variable_wins(self, param, monkeypatch):
        env = Environment("Stored", {param.name: "stored"})
        monkeypatch.setenv(param.environment_variable, "from-env")
        assert env.get(param.name) == "from-env"

    def test_environment_variable_resolves_unset_parameter(self, monkeypatch):
        env = Environment("Empty")
        monkeypatch.setenv("AZURE_GALLERY_ENDPOINT_URL", "https://gallery.test/")
        assert env.get(Endpoint.GALLERY_ENDPOINT_URL) == "https://gallery.test/"

    def test_empty_environment_variable_is_ignored(self, monkeypatch, custom_env):
        monkeypatch.setenv("AZURE_PORTAL_URL", "")
        assert custom_env.get("portalUrl") == "https://portal.contoso.test/?LinkId=1"

    def test_set_does_not_beat_environment_variable(self, monkeypatch, custom_env):
        monkeypatch.setenv("AZURE_PORTAL_URL", "https://env.portal")
        custom_env.set("portalUrl", "https://new.portal")
        assert custom_env.get("portalUrl") == "https://env.portal"
        assert custom_env.values["portalUrl"] == "https://new.portal"

    def test_item_access(self, custom_env):
        custom_env[Endpoint.GALLERY_ENDPOINT_URL] = "https://gallery/"
        assert custom_env["galleryEndpointUrl"] == "https://gallery/"

    def test_unknown_parameter(self, custom_env):
        with pytest.raises(UnknownParameterError):
            custom_env.get("nope")
        with pytest.raises(UnknownParameterError):
            custom_env.set("nope", "x")

    def test_describe_reports_overrides(self, monkeypatch, custom_env):
        monkeypatch.setenv("AZURE_PORTAL_URL", "https://env.portal")
        rows = {param.name: (stored, override) for param, stored, override in custom_env.describe()}
        assert rows["portalUrl"] == ("https://portal.contoso.test/?LinkId=1", "https://env.portal")
        assert rows["galleryEndpointUrl"] == (None, None)


class TestRealm:
    """Test home realm injection into login URLs."""

    def test_realm_added(self):
        url = add_realm("http://go.microsoft.com/fwlink/?LinkId=254433", "contoso.com")
        assert url == "http://go.microsoft.com/fwlink/?LinkId=254433&whr=contoso.com"

    def test_realm_replaces_existing(self):
        url = add_realm("https://portal.test/?whr=old.com&a=1", "contoso.com")
        assert url == "https://portal.test/?a=1&whr=contoso.com"

    def test_realm_on_url_without_query(self):
        assert add_realm("https://portal.test/", "contoso.com") == "https://portal.test/?whr=contoso.com"

    @pytest.mark.parametrize("realm", [None, ""])
    def test_falsy_realm_passthrough(self, realm):
        url = "https://portal.test/?LinkId=1&x=%20y"
        assert add_realm(url, realm) == url

    def test_portal_url(self, custom_env):
        assert custom_env.get_portal_url() == "https://portal.contoso.test/?LinkId=1"
        assert custom_env.get_portal_url("contoso.com") == (
            "https://portal.contoso.test/?LinkId=1&whr=contoso.com"
        )

    def test_publishing_profile_url_requires_endpoint(self, custom_env):
        with pytest.raises(EndpointNotDefinedError):
            custom_env.get_publishing_profile_url("contoso.com")

    def test_publishing_profile_url(self, custom_env):
        custom_env.set("publishingProfileUrl", "https://publish.test/")
        assert custom_env.get_publishing_profile_url("r.com") == "https://publish.test/?whr=r.com"


class TestAuthConfig:
    """Test derived auth configuration."""

    def test_defaults(self, custom_env):
        config = custom_env.get_auth_config()
        assert config.tenant_id == "common"
        assert config.resource_id == "https://management.contoso.test/"
        assert config.authority_url == "https://login.contoso.test"
        assert config.client_id == DEFAULT_CLIENT_ID
        assert custom_env.auth_config == config

    def test_explicit_values(self, custom_env):
        config = custom_env.get_auth_config("t1", "r1")
        assert config.tenant_id == "t1"
        assert config.resource_id == "r1"

    def test_injected_client_id(self):
        env = Environment("X", {
            "activeDirectoryEndpointUrl": "https://login",
            "activeDirectoryResourceId": "https://res/",
            "commonTenantName": "common",
        }, client_id="my-client")
        assert env.get_auth_config().client_id == "my-client"

    def test_scope(self, custom_env):
        assert custom_env.get_auth_config().scope == "https://management.contoso.test/.default"

    def test_env_var_override_flows_into_config(self, monkeypatch, custom_env):
        monkeypatch.setenv("AZURE_ACTIVEDIRECTORY_COMMON_TENANT_NAME", "organizations")
        assert custom_env.get_auth_config().tenant_id == "organizations"

    def test_missing_authority_fails(self):
        with pytest.raises(EndpointNotDefinedError):
            Environment("Empty").get_auth_config("t1", "r1")


class TestSerialization:
    """Test to_dict/from_dict round trips."""

    def test_to_dict_layout(self, custom_env):
        data = custom_env.to_dict()
        assert list(data)[0] == "name"
        assert data["name"] == "Contoso"
        assert set(data) == {"name", *PARAMETER_NAMES}
        assert data["galleryEndpointUrl"] is None

    def test_round_trip(self, custom_env):
        restored = Environment.from_dict(custom_env.to_dict())
        assert dict(restored.values) == dict(custom_env.values)
        assert restored == custom_env

    def test_json_round_trip(self, custom_env):
        restored = Environment.from_dict(json.loads(custom_env.to_json()))
        assert restored == custom_env

    def test_serialization_ignores_environment_variables(self, monkeypatch, custom_env):
        monkeypatch.setenv("AZURE_PORTAL_URL", "https://env.portal")
        assert custom_env.to_dict()["portalUrl"] == "https://portal.contoso.test/?LinkId=1"

    def test_equality_considers_values(self, custom_env):
        other = Environment.from_dict(custom_env.to_dict())
        other.set("portalUrl", "https://changed")
        assert other != custom_env


class TestClients:
    """Test that client factories receive the right endpoints."""

    def test_asm_client(self, custom_env):
        factory = Mock()
        env = Environment.from_dict(custom_env.to_dict(), clients=factory)
        client = env.get_asm_client("creds")
        factory.create_subscription_client.assert_called_once_with(
            "creds", "https://management.contoso.test"
        )
        assert client is factory.create_subscription_client.return_value

    def test_arm_client(self, custom_env, monkeypatch):
        factory = Mock()
        env = Environment.from_dict(custom_env.to_dict(), clients=factory)
        monkeypatch.setenv("AZURE_RESOURCEMANAGERENDPOINT_URL", "https://arm.test/")
        env.get_arm_client("creds")
        factory.create_resource_subscription_client.assert_called_once_with("creds", "https://arm.test/")

    def test_arm_client_missing_endpoint(self, custom_env):
        env = Environment.from_dict(custom_env.to_dict(), clients=Mock())
        with pytest.raises(EndpointNotDefinedError):
            env.get_arm_client("creds")
