"""Cloud environments: named bundles of service endpoints and auth parameters.

Reading a parameter resolves, in order:

1. the process environment variable bound to the parameter (if non-empty)
2. the value stored on the Environment

A parameter with neither raises ``EndpointNotDefinedError`` when it is read,
never when the Environment is constructed, so partially populated environments
can still be created, listed and serialized.
"""

import json
import logging
import os
import urllib.parse
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_CLIENT_ID, REALM_QUERY_PARAM
from .errors import EndpointNotDefinedError
from .models import AuthConfig
from .parameters import (
    ENDPOINT_PARAMETERS,
    PARAMETER_NAMES,
    Endpoint,
    EndpointParameter,
    get_parameter,
    is_parameter,
)

logger = logging.getLogger(__name__)


def add_realm(target_url: str, realm: Optional[str]) -> str:
    """Add (or replace) the home realm hint on a login URL.

    The query string is rebuilt from its parsed pairs so the ``whr`` value
    is the only one present.

    Examples:
        ("https://portal/?LinkId=1", "contoso.com") -> "https://portal/?LinkId=1&whr=contoso.com"
        ("https://portal/?LinkId=1", None) -> "https://portal/?LinkId=1"
    """
    if not realm:
        return target_url

    parts = urllib.parse.urlsplit(target_url)
    query = [
        (key, value)
        for key, value in urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
        if key != REALM_QUERY_PARAM
    ]
    query.append((REALM_QUERY_PARAM, realm))
    return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(query)))


class Environment:
    """A named cloud deployment.

    Stored values are the fallback layer; environment variables always win
    when set. Use ``get``/``set`` (or item access) with a parameter name or
    an ``Endpoint`` member.
    """

    def __init__(
        self,
        name: str,
        values: Optional[Mapping[str, Optional[str]]] = None,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
        clients: Any = None,
    ):
        """Create an environment.

        Args:
            name: Unique environment name (e.g. "AzureCloud")
            values: Parameter values keyed by parameter name; missing
                parameters are stored as None
            client_id: Client identity used for token requests
            clients: ClientFactory for ASM/ARM clients (defaults to the Azure SDK factory)
        """
        self.name = name
        self.client_id = client_id
        self._clients = clients
        self._values: Dict[str, Optional[str]] = dict.fromkeys(PARAMETER_NAMES)

        for key, value in (values or {}).items():
            key = key.value if isinstance(key, Endpoint) else key
            if is_parameter(key):
                self._values[key] = value
            elif key != "name":
                logger.debug("Ignoring unknown parameter %s for environment %s", key, name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], **kwargs) -> "Environment":
        """Build an environment from its serialized form (see ``to_dict``)."""
        if not isinstance(data, Mapping) or not data.get("name"):
            raise ValueError("Environment data requires a 'name'")
        return cls(data["name"], data, **kwargs)

    # ---- parameter access ------------------------------------------------

    def get(self, name: Union[str, Endpoint]) -> str:
        """Resolve a parameter value.

        Raises:
            UnknownParameterError: If the parameter is not registered
            EndpointNotDefinedError: If neither the environment variable nor
                the stored value is set
        """
        param = get_parameter(name)
        override = os.environ.get(param.environment_variable)
        if override:
            logger.debug("Using %s from %s", param.name, param.environment_variable)
            return override

        value = self._values[param.name]
        if value is None:
            raise EndpointNotDefinedError(param.name, self.name)
        return value

    def set(self, name: Union[str, Endpoint], value: Optional[str]) -> None:
        """Store a parameter value.

        Only the stored (fallback) layer is written. If the bound environment
        variable is set, ``get`` keeps returning the variable's value.
        """
        param = get_parameter(name)
        self._values[param.name] = value

    def __getitem__(self, name: Union[str, Endpoint]) -> str:
        return self.get(name)

    def __setitem__(self, name: Union[str, Endpoint], value: Optional[str]) -> None:
        self.set(name, value)

    @property
    def values(self) -> Mapping[str, Optional[str]]:
        """Read-only view of the stored values (environment variables not applied)."""
        return MappingProxyType(self._values)

    def describe(self) -> List[Tuple[EndpointParameter, Optional[str], Optional[str]]]:
        """List (parameter, stored value, environment variable override) rows."""
        return [
            (param, self._values[param.name], os.environ.get(param.environment_variable) or None)
            for param in ENDPOINT_PARAMETERS
        ]

    @property
    def is_public_environment(self) -> bool:
        """True if this environment's name is one of the built-in environments."""
        from .catalog import is_public_name
        return is_public_name(self.name)

    # ---- derived values --------------------------------------------------

    def get_portal_url(self, realm: Optional[str] = None) -> str:
        return add_realm(self.get(Endpoint.PORTAL_URL), realm)

    def get_publishing_profile_url(self, realm: Optional[str] = None) -> str:
        return add_realm(self.get(Endpoint.PUBLISHING_PROFILE_URL), realm)

    def get_auth_config(
        self,
        tenant_id: Optional[str] = None,
        resource_id: Optional[str] = None,
    ) -> AuthConfig:
        """Auth parameters for a tenant.

        Args:
            tenant_id: Tenant to authenticate against (defaults to the common tenant)
            resource_id: Resource to request tokens for (defaults to the AD resource id)

        Returns:
            AuthConfig for this environment
        """
        return AuthConfig(
            authority_url=self.get(Endpoint.ACTIVE_DIRECTORY_ENDPOINT_URL),
            tenant_id=tenant_id or self.get(Endpoint.COMMON_TENANT_NAME),
            resource_id=resource_id or self.get(Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID),
            client_id=self.client_id,
        )

    @property
    def auth_config(self) -> AuthConfig:
        return self.get_auth_config()

    # ---- serialization ---------------------------------------------------

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Serialize the name and raw stored values (nulls included)."""
        data: Dict[str, Optional[str]] = {"name": self.name}
        data.update(self._values)
        return data

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    # ---- clients ---------------------------------------------------------

    @property
    def clients(self):
        if self._clients is None:
            from .clients import DefaultClientFactory
            self._clients = DefaultClientFactory()
        return self._clients

    def get_asm_client(self, credentials: Any) -> Any:
        """Classic service management client bound to this environment."""
        return self.clients.create_subscription_client(
            credentials, self.get(Endpoint.MANAGEMENT_ENDPOINT_URL)
        )

    def get_arm_client(self, credentials: Any) -> Any:
        """Resource manager subscription client bound to this environment."""
        return self.clients.create_resource_subscription_client(
            credentials, self.get(Endpoint.RESOURCE_MANAGER_ENDPOINT_URL)
        )

    # ---- login -----------------------------------------------------------

    async def add_account(self, login, backend=None):
        """Log in and return the subscriptions available to the credentials.

        Args:
            login: UserLogin or ServicePrincipalLogin
            backend: AccountBackend (defaults to the Azure identity backend)

        Returns:
            List of Subscription bound to this environment
        """
        from .auth import get_account_backend
        from .login import add_account
        return await add_account(self, login, backend or get_account_backend())

    async def acquire_token(self, username: str, password: str, tenant_id: Optional[str] = None, backend=None):
        from .auth import get_account_backend
        from .login import acquire_token
        return await acquire_token(self, username, password, tenant_id, backend or get_account_backend())

    # ---- dunder ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self.name == other.name and self._values == other._values

    __hash__ = None

    def __repr__(self) -> str:
        return f"Environment(name={self.name!r})"
