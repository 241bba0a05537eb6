"""Custom exceptions for cloud-profile.

This module defines typed exceptions for better error handling and clearer
error messages throughout the application.
"""


class ProfileError(RuntimeError):
    """Base class for all cloud-profile errors."""
    pass


# Endpoint Errors
class EndpointNotDefinedError(ProfileError):
    """Endpoint has neither an environment variable nor a stored value."""

    def __init__(self, parameter: str, environment: str):
        self.parameter = parameter
        self.environment = environment
        super().__init__(
            f"The endpoint field {parameter} is not defined in environment '{environment}'. "
            f"Either this feature is not supported or the endpoint needs to be set "
            f"using 'cloud-profile env set'."
        )


class UnknownParameterError(ProfileError):
    """Parameter name is not in the endpoint registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown endpoint parameter '{name}'")


# Catalog / Store Errors
class CatalogError(ProfileError):
    """Base class for environment lookup and storage errors."""
    pass


class EnvironmentNotFoundError(CatalogError):
    """No public or custom environment has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Environment '{name}' not found")


class EnvironmentExistsError(CatalogError):
    """A custom environment with this name is already stored."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Environment '{name}' already exists")


class PublicEnvironmentError(CatalogError):
    """Built-in environments cannot be added, modified or removed."""

    def __init__(self, name: str, action: str):
        self.name = name
        super().__init__(f"Cannot {action} public environment '{name}'")


# Login Errors
class LoginError(ProfileError):
    """Base class for credential exchange and subscription lookup errors."""
    pass


class AuthError(LoginError):
    """Credential exchange with the identity provider failed."""
    pass


class SubscriptionLookupError(LoginError):
    """Subscription discovery failed."""
    pass


# Configuration Errors
class ConfigError(ProfileError):
    """Invalid profile configuration."""
    pass
