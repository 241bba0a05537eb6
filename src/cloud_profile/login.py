"""Account login orchestration.

A login turns credentials into the list of subscriptions they can use:

- ``UserLogin``: the backend discovers tenants and subscriptions itself.
- ``ServicePrincipalLogin``: a token is acquired for the given tenant first,
  then only that tenant is queried.

Both paths end in ``process_subscriptions``, which normalizes the backend's
records. Backend errors propagate unchanged and no partial list is returned.
"""

import logging
from typing import Any, Iterable, List, Optional

from .auth.base import AccountBackend, RawRecord
from .environment import Environment
from .models import (
    Login,
    RawSubscription,
    ServicePrincipalLogin,
    Subscription,
    SubscriptionUser,
    TenantInfo,
    UserLogin,
    UserType,
)

logger = logging.getLogger(__name__)


def process_subscriptions(
    environment: Environment,
    raw_subscriptions: Iterable[RawRecord],
    username: str,
    tenant: Optional[str],
    user_type: UserType,
) -> List[Subscription]:
    """
    Normalize raw subscription records, preserving input order.

    The tenant id reported by the source wins; partner logins omit it, in
    which case the login tenant is used.

    Args:
        environment: Environment the login ran against (bound to every result)
        raw_subscriptions: Records from the backend (mappings or RawSubscription)
        username: Normalized user or client name
        tenant: Tenant supplied at login
        user_type: Kind of identity used

    Returns:
        List of Subscription
    """
    user = SubscriptionUser(name=username, tenant=tenant, type=user_type)
    subscriptions = []
    for record in raw_subscriptions:
        raw = record if isinstance(record, RawSubscription) else RawSubscription.model_validate(record)
        name = raw.displayName or raw.subscriptionName
        if name is None:
            logger.debug("Subscription %s has no name", raw.subscriptionId)
        subscriptions.append(Subscription(
            id=raw.subscriptionId,
            name=name,
            user=user.model_copy(),
            tenant_id=raw.activeDirectoryTenantId or tenant,
            environment=environment,
        ))
    return subscriptions


async def add_account(
    environment: Environment,
    login: Login,
    backend: AccountBackend,
) -> List[Subscription]:
    """
    Log in and collect the subscriptions available to the credentials.

    Args:
        environment: Environment to log in to
        login: UserLogin or ServicePrincipalLogin
        backend: Credential exchange and subscription lookup backend

    Returns:
        Subscriptions bound to ``environment``

    Raises:
        Whatever the backend raises, unchanged
    """
    if isinstance(login, ServicePrincipalLogin):
        username = backend.normalize_user_name(login.client_id)
        tenant = login.tenant
        user_type = UserType.SERVICE_PRINCIPAL
        logger.info("Logging in service principal %s to %s (tenant %s)", username, environment.name, tenant)

        auth_config = environment.get_auth_config(tenant)
        token = await backend.acquire_service_principal_token(auth_config, username, login.secret)
        tenant_info = TenantInfo(tenant_id=tenant, auth_context=token)
        raw = await backend.get_subscriptions_from_tenants(environment, username, [tenant_info])
    elif isinstance(login, UserLogin):
        username = backend.normalize_user_name(login.username)
        tenant = login.tenant
        user_type = UserType.USER
        logger.info("Logging in user %s to %s", username, environment.name)

        raw = await backend.get_subscriptions(environment, username, login.password, tenant)
    else:
        raise TypeError(f"Unsupported login type: {type(login).__name__}")

    subscriptions = process_subscriptions(environment, raw, username, tenant, user_type)
    logger.info("Login for %s returned %d subscription(s)", username, len(subscriptions))
    return subscriptions


async def acquire_token(
    environment: Environment,
    username: str,
    password: str,
    tenant_id: Optional[str],
    backend: AccountBackend,
) -> Any:
    """Exchange user credentials for a token in one tenant; errors pass through."""
    return await backend.acquire_token(environment.get_auth_config(tenant_id), username, password)
