"""Management client factories.

Environments only supply endpoint URLs; the clients themselves come from a
``ClientFactory``. The default factory builds a small requests-based client
for the classic service management API and the azure-mgmt-resource
SubscriptionClient for the resource manager.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Protocol

import requests
from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.mgmt.resource import SubscriptionClient

from .constants import ASM_API_VERSION
from .errors import AuthError, SubscriptionLookupError

logger = logging.getLogger(__name__)

ASM_NAMESPACE = "{http://schemas.microsoft.com/windowsazure}"


class ClientFactory(Protocol):
    """Builds management clients for an endpoint."""

    def create_subscription_client(self, credentials: Any, endpoint_url: str) -> Any:
        """Classic (service management) subscription client."""
        ...

    def create_resource_subscription_client(self, credentials: Any, endpoint_url: str) -> Any:
        """Resource manager subscription client."""
        ...


def _scope_for(endpoint_url: str) -> str:
    return f"{endpoint_url.rstrip('/')}/.default"


class ClassicSubscriptionClient:
    """Minimal client for the classic service management subscriptions API."""

    def __init__(
        self,
        credentials: Any,
        endpoint_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        """
        Args:
            credentials: azure-core TokenCredential
            endpoint_url: Management endpoint (e.g. "https://management.core.windows.net")
            session: Optional requests session
            timeout: Request timeout in seconds
        """
        self.credentials = credentials
        self.endpoint_url = endpoint_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def list_subscriptions(self) -> List[Dict[str, Any]]:
        """
        List subscriptions visible to the credentials.

        Returns:
            Records with subscriptionId, subscriptionName, state and
            activeDirectoryTenantId keys

        Raises:
            AuthError: If no token can be issued or the endpoint rejects it (401/403)
            SubscriptionLookupError: On any other transport or HTTP failure
        """
        url = f"{self.endpoint_url}/subscriptions"
        try:
            token = self.credentials.get_token(_scope_for(self.endpoint_url)).token
        except ClientAuthenticationError as e:
            raise AuthError(f"Cannot get a token for {self.endpoint_url}: {e.message or e}") from e
        except AzureError as e:
            raise SubscriptionLookupError(f"Cannot get a token for {self.endpoint_url}: {e.message or e}") from e

        headers = {
            "x-ms-version": ASM_API_VERSION,
            "Authorization": f"Bearer {token}",
            "Accept": "application/xml",
        }

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise SubscriptionLookupError(f"Request to {url} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthError(f"Access denied listing subscriptions at {url} ({response.status_code})")
        if response.status_code >= 400:
            raise SubscriptionLookupError(
                f"Listing subscriptions at {url} failed with HTTP {response.status_code}: "
                f"{response.text[:200]}"
            )

        return self._parse(response.content)

    @staticmethod
    def _parse(content: bytes) -> List[Dict[str, Any]]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise SubscriptionLookupError(f"Invalid subscriptions response: {e}") from e

        def text(node, tag):
            child = node.find(f"{ASM_NAMESPACE}{tag}")
            return child.text if child is not None else None

        records = []
        for node in root.iter(f"{ASM_NAMESPACE}Subscription"):
            records.append({
                "subscriptionId": text(node, "SubscriptionID"),
                "subscriptionName": text(node, "SubscriptionName"),
                "state": text(node, "SubscriptionStatus"),
                "activeDirectoryTenantId": text(node, "AADTenantID"),
            })
        logger.debug("Parsed %d classic subscription(s)", len(records))
        return records


class DefaultClientFactory:
    """Client factory backed by requests (ASM) and azure-mgmt-resource (ARM)."""

    def create_subscription_client(self, credentials: Any, endpoint_url: str) -> ClassicSubscriptionClient:
        return ClassicSubscriptionClient(credentials, endpoint_url)

    def create_resource_subscription_client(self, credentials: Any, endpoint_url: str) -> SubscriptionClient:
        return SubscriptionClient(
            credentials,
            base_url=endpoint_url,
            credential_scopes=[_scope_for(endpoint_url)],
        )
