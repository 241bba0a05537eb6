"""Credential exchange and subscription discovery backends.

The login orchestrator talks to an ``AccountBackend``. The default backend
uses azure-identity for tokens and azure-mgmt-resource for subscription
discovery; tests and embedders can supply their own.
"""

from .base import AccountBackend
from .azure import AzureIdentityBackend, normalize_user_name


def get_account_backend() -> AccountBackend:
    """Get the default account backend."""
    return AzureIdentityBackend()


__all__ = ["AccountBackend", "AzureIdentityBackend", "get_account_backend", "normalize_user_name"]
