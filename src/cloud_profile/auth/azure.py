"""Azure SDK account backend."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.identity import ClientSecretCredential, UsernamePasswordCredential

from ..errors import AuthError, SubscriptionLookupError
from ..models import AuthConfig, TenantInfo

logger = logging.getLogger(__name__)


def normalize_user_name(raw: str) -> str:
    """Trim and lowercase a user name so profile lookups are case insensitive."""
    return raw.strip().lower()


class AzureIdentityBackend:
    """
    Account backend built on azure-identity and azure-mgmt-resource.

    Tokens are returned as azure-identity credentials that have already
    produced one token for the configured scope, so bad credentials fail
    at login time instead of on first client use.
    """

    def normalize_user_name(self, raw: str) -> str:
        return normalize_user_name(raw)

    async def acquire_service_principal_token(
        self, auth_config: AuthConfig, client_id: str, secret: str
    ) -> TokenCredential:
        """
        Authenticate a service principal against one tenant.

        Args:
            auth_config: Authority, tenant and resource to authenticate against
            client_id: Application (client) id of the service principal
            secret: Client secret

        Returns:
            Validated ClientSecretCredential

        Raises:
            AuthError: If the credentials are rejected or the authority cannot be reached
        """
        try:
            credential = ClientSecretCredential(
                tenant_id=auth_config.tenant_id,
                client_id=client_id,
                client_secret=secret,
                authority=auth_config.authority_url,
            )
        except ValueError as e:
            raise AuthError(f"Invalid credentials for '{client_id}': {e}") from e
        await self._validate(credential, auth_config, client_id)
        return credential

    async def acquire_token(self, auth_config: AuthConfig, username: str, password: str) -> TokenCredential:
        """
        Authenticate a user with a password against one tenant.

        Raises:
            AuthError: If the credentials are rejected or the authority cannot be reached
        """
        try:
            credential = UsernamePasswordCredential(
                client_id=auth_config.client_id,
                username=username,
                password=password,
                tenant_id=auth_config.tenant_id,
                authority=auth_config.authority_url,
            )
        except ValueError as e:
            raise AuthError(f"Invalid credentials for '{username}': {e}") from e
        await self._validate(credential, auth_config, username)
        return credential

    async def get_subscriptions(
        self,
        environment,
        username: str,
        password: str,
        tenant: Optional[str],
    ) -> List[Dict[str, Any]]:
        """
        Discover subscriptions for a user.

        With an explicit tenant only that tenant is queried. Otherwise the
        tenants visible from the common tenant are enumerated and the user
        is authenticated against each of them.
        """
        auth_config = environment.get_auth_config(tenant)
        credential = await self.acquire_token(auth_config, username, password)

        if tenant:
            tenant_ids = [tenant]
        else:
            tenant_ids = await asyncio.to_thread(self._list_tenants, environment, credential)
            logger.debug("Discovered %d tenant(s) for %s", len(tenant_ids), username)

        tenant_infos = []
        for tenant_id in tenant_ids:
            if tenant_id == auth_config.tenant_id:
                tenant_credential = credential
            else:
                tenant_credential = await self.acquire_token(
                    environment.get_auth_config(tenant_id), username, password
                )
            tenant_infos.append(TenantInfo(tenant_id=tenant_id, auth_context=tenant_credential))

        return await self.get_subscriptions_from_tenants(environment, username, tenant_infos)

    async def get_subscriptions_from_tenants(
        self,
        environment,
        username: str,
        tenant_infos: List[TenantInfo],
    ) -> List[Dict[str, Any]]:
        """
        List subscriptions in each tenant.

        Raises:
            SubscriptionLookupError: If the resource manager call fails
        """
        records: List[Dict[str, Any]] = []
        for info in tenant_infos:
            found = await asyncio.to_thread(self._list_subscriptions, environment, info)
            logger.debug("Tenant %s: %d subscription(s) for %s", info.tenant_id, len(found), username)
            records.extend(found)
        return records

    # ---- helpers -----------------------------------------------------------

    async def _validate(self, credential: TokenCredential, auth_config: AuthConfig, who: str) -> None:
        try:
            await asyncio.to_thread(credential.get_token, auth_config.scope)
        except ClientAuthenticationError as e:
            raise AuthError(
                f"Authentication failed for '{who}' in tenant '{auth_config.tenant_id}'.\n"
                f"Authority: {auth_config.authority_url}\n"
                f"Error: {e.message or e}"
            ) from e
        except AzureError as e:
            raise AuthError(
                f"Could not authenticate '{who}' against {auth_config.authority_url}: {e.message or e}"
            ) from e

    def _list_tenants(self, environment, credential: TokenCredential) -> List[str]:
        client = environment.get_arm_client(credential)
        try:
            return [t.tenant_id for t in client.tenants.list() if t.tenant_id]
        except AzureError as e:
            raise SubscriptionLookupError(f"Failed to list tenants: {e.message or e}") from e

    def _list_subscriptions(self, environment, info: TenantInfo) -> List[Dict[str, Any]]:
        client = environment.get_arm_client(info.auth_context)
        try:
            return [
                {
                    "subscriptionId": sub.subscription_id,
                    "displayName": sub.display_name,
                    "state": getattr(sub.state, "value", sub.state),
                    "activeDirectoryTenantId": getattr(sub, "tenant_id", None),
                }
                for sub in client.subscriptions.list()
            ]
        except AzureError as e:
            raise SubscriptionLookupError(
                f"Failed to list subscriptions in tenant '{info.tenant_id}': {e.message or e}"
            ) from e
