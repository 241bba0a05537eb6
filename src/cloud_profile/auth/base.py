"""Base protocol for account backends."""

from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Protocol, Sequence, Union

from ..models import AuthConfig, RawSubscription, TenantInfo

if TYPE_CHECKING:
    from ..environment import Environment

RawRecord = Union[RawSubscription, Mapping[str, Any]]


class AccountBackend(Protocol):
    """
    Protocol for credential exchange and subscription discovery.

    The login orchestrator only depends on this protocol. Implementations
    own transport, retries and timeouts.
    """

    def normalize_user_name(self, raw: str) -> str:
        """Canonical form of a user or client name."""
        ...

    async def acquire_service_principal_token(
        self, auth_config: AuthConfig, client_id: str, secret: str
    ) -> Any:
        """
        Exchange service principal credentials for a token.

        Returns:
            Token (or credential) usable as ``TenantInfo.auth_context``
        """
        ...

    async def acquire_token(self, auth_config: AuthConfig, username: str, password: str) -> Any:
        """Exchange user credentials for a token."""
        ...

    async def get_subscriptions(
        self,
        environment: "Environment",
        username: str,
        password: str,
        tenant: Optional[str],
    ) -> Sequence[RawRecord]:
        """
        Discover subscriptions for user credentials.

        Implementations perform their own tenant discovery.
        """
        ...

    async def get_subscriptions_from_tenants(
        self,
        environment: "Environment",
        username: str,
        tenant_infos: List[TenantInfo],
    ) -> Sequence[RawRecord]:
        """Collect subscriptions from already authenticated tenants."""
        ...
