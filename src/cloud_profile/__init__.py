"""Cloud environments, endpoint resolution and account login."""

from .catalog import PUBLIC_ENVIRONMENTS, get_public_environment, is_public_name
from .constants import DEFAULT_CLIENT_ID, PROFILE_VERSION as __version__
from .environment import Environment, add_realm
from .errors import (
    AuthError,
    EndpointNotDefinedError,
    EnvironmentExistsError,
    EnvironmentNotFoundError,
    ProfileError,
    PublicEnvironmentError,
    SubscriptionLookupError,
    UnknownParameterError,
)
from .models import (
    AuthConfig,
    ServicePrincipalLogin,
    Subscription,
    SubscriptionUser,
    TenantInfo,
    UserLogin,
    UserType,
)
from .parameters import ENDPOINT_PARAMETERS, Endpoint, EndpointParameter, get_parameter

__all__ = [
    "AuthConfig",
    "AuthError",
    "DEFAULT_CLIENT_ID",
    "ENDPOINT_PARAMETERS",
    "Endpoint",
    "EndpointNotDefinedError",
    "EndpointParameter",
    "Environment",
    "EnvironmentExistsError",
    "EnvironmentNotFoundError",
    "PUBLIC_ENVIRONMENTS",
    "ProfileError",
    "PublicEnvironmentError",
    "ServicePrincipalLogin",
    "Subscription",
    "SubscriptionLookupError",
    "SubscriptionUser",
    "TenantInfo",
    "UnknownParameterError",
    "UserLogin",
    "UserType",
    "add_realm",
    "get_parameter",
    "get_public_environment",
    "is_public_name",
]
