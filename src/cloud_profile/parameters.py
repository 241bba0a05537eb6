"""Endpoint parameter registry.

Every environment carries exactly the parameters listed in
``ENDPOINT_PARAMETERS``. Each parameter is bound to one process environment
variable that overrides the stored value when set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class Endpoint(str, Enum):
    """Logical endpoint names (also the keys of the serialized layout)."""
    PORTAL_URL = "portalUrl"
    PUBLISHING_PROFILE_URL = "publishingProfileUrl"
    MANAGEMENT_ENDPOINT_URL = "managementEndpointUrl"
    RESOURCE_MANAGER_ENDPOINT_URL = "resourceManagerEndpointUrl"
    SQL_MANAGEMENT_ENDPOINT_URL = "sqlManagementEndpointUrl"
    SQL_SERVER_HOSTNAME_SUFFIX = "sqlServerHostnameSuffix"
    ACTIVE_DIRECTORY_ENDPOINT_URL = "activeDirectoryEndpointUrl"
    ACTIVE_DIRECTORY_RESOURCE_ID = "activeDirectoryResourceId"
    COMMON_TENANT_NAME = "commonTenantName"
    GALLERY_ENDPOINT_URL = "galleryEndpointUrl"
    ACTIVE_DIRECTORY_GRAPH_RESOURCE_ID = "activeDirectoryGraphResourceId"
    ACTIVE_DIRECTORY_GRAPH_API_VERSION = "activeDirectoryGraphApiVersion"


@dataclass(frozen=True)
class EndpointParameter:
    """A named endpoint setting and the environment variable overriding it."""
    name: str
    environment_variable: str
    description: str


ENDPOINT_PARAMETERS: Tuple[EndpointParameter, ...] = (
    EndpointParameter(Endpoint.PORTAL_URL.value, "AZURE_PORTAL_URL",
                      "the management portal URL"),
    EndpointParameter(Endpoint.PUBLISHING_PROFILE_URL.value, "AZURE_PUBLISHINGPROFILE_URL",
                      "the publish settings file URL"),
    EndpointParameter(Endpoint.MANAGEMENT_ENDPOINT_URL.value, "AZURE_MANAGEMENTENDPOINT_URL",
                      "the management service endpoint"),
    EndpointParameter(Endpoint.RESOURCE_MANAGER_ENDPOINT_URL.value, "AZURE_RESOURCEMANAGERENDPOINT_URL",
                      "the resource management endpoint"),
    EndpointParameter(Endpoint.SQL_MANAGEMENT_ENDPOINT_URL.value, "AZURE_SQL_MANAGEMENTENDPOINT_URL",
                      "the sql server management endpoint for mobile commands"),
    EndpointParameter(Endpoint.SQL_SERVER_HOSTNAME_SUFFIX.value, "AZURE_SQL_SERVER_HOSTNAME_SUFFIX",
                      "the dns suffix for sql servers"),
    EndpointParameter(Endpoint.ACTIVE_DIRECTORY_ENDPOINT_URL.value, "AZURE_ACTIVEDIRECTORY_ENDPOINT_URL",
                      "the Active Directory login endpoint"),
    EndpointParameter(Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID.value, "AZURE_ACTIVEDIRECTORY_RESOURCE_ID",
                      "The resource ID to obtain AD tokens for"),
    EndpointParameter(Endpoint.COMMON_TENANT_NAME.value, "AZURE_ACTIVEDIRECTORY_COMMON_TENANT_NAME",
                      "the Active Directory common tenant name"),
    EndpointParameter(Endpoint.GALLERY_ENDPOINT_URL.value, "AZURE_GALLERY_ENDPOINT_URL",
                      "the template gallery endpoint"),
    EndpointParameter(Endpoint.ACTIVE_DIRECTORY_GRAPH_RESOURCE_ID.value, "AZURE_ACTIVEDIRECTORY_GRAPH_RESOURCE_ID",
                      "the Active Directory resource ID"),
    EndpointParameter(Endpoint.ACTIVE_DIRECTORY_GRAPH_API_VERSION.value, "AZURE_ACTIVEDIRECTORY_GRAPH_API_VERSION",
                      "the Active Directory api version"),
)

_BY_NAME: Dict[str, EndpointParameter] = {p.name: p for p in ENDPOINT_PARAMETERS}

PARAMETER_NAMES: Tuple[str, ...] = tuple(p.name for p in ENDPOINT_PARAMETERS)


def get_parameter(name: Union[str, Endpoint]) -> EndpointParameter:
    """Look up a registered parameter by name.

    Args:
        name: Parameter name (e.g. "portalUrl") or ``Endpoint`` member

    Returns:
        The matching EndpointParameter

    Raises:
        UnknownParameterError: If the name is not registered
    """
    key = name.value if isinstance(name, Endpoint) else name
    try:
        return _BY_NAME[key]
    except KeyError:
        from .errors import UnknownParameterError
        raise UnknownParameterError(str(key)) from None


def is_parameter(name: str) -> bool:
    """Check whether a name is a registered parameter."""
    return name in _BY_NAME
