"""Data models for authentication parameters, logins and subscriptions."""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class AuthConfig(BaseModel):
    """Parameters handed to the token exchange for one tenant."""
    model_config = ConfigDict(frozen=True)

    authority_url: str
    tenant_id: str
    resource_id: str
    client_id: str

    @property
    def scope(self) -> str:
        """OAuth2 scope for the configured resource."""
        return f"{self.resource_id.rstrip('/')}/.default"


class UserType(str, Enum):
    """Kind of identity a subscription was obtained with."""
    USER = "user"
    SERVICE_PRINCIPAL = "servicePrincipal"


class SubscriptionUser(BaseModel):
    """Identity a subscription was obtained with."""
    name: str
    tenant: Optional[str] = None
    type: UserType


class RawSubscription(BaseModel):
    """Subscription record as reported by a subscription source.

    Sources differ in which fields they fill; partner logins for instance
    omit the directory tenant id.
    """
    model_config = ConfigDict(extra="allow")

    subscriptionId: Optional[str] = None
    displayName: Optional[str] = None
    subscriptionName: Optional[str] = None
    activeDirectoryTenantId: Optional[str] = None


class Subscription(BaseModel):
    """Normalized subscription produced by a login.

    ``environment`` refers back to the Environment that performed the login
    so clients can be created later; it is not serialized.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: Optional[str] = None
    name: Optional[str] = None
    user: SubscriptionUser
    tenant_id: Optional[str] = None
    environment: Any = Field(default=None, exclude=True, repr=False)

    def get_asm_client(self, credentials: Any) -> Any:
        """Classic management client for this subscription's environment."""
        return self.environment.get_asm_client(credentials)

    def get_arm_client(self, credentials: Any) -> Any:
        """Resource manager client for this subscription's environment."""
        return self.environment.get_arm_client(credentials)

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        data["environmentName"] = self.environment.name if self.environment is not None else None
        return data


class TenantInfo(BaseModel):
    """A tenant paired with the token (or credential) acquired for it."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    tenant_id: str
    auth_context: Any = None


class UserLogin(BaseModel):
    """Interactive user credentials."""
    kind: Literal["user"] = "user"
    username: str
    password: str = Field(repr=False)
    tenant: Optional[str] = None


class ServicePrincipalLogin(BaseModel):
    """Service principal (application) credentials."""
    kind: Literal["servicePrincipal"] = "servicePrincipal"
    client_id: str
    secret: str = Field(repr=False)
    tenant: str


Login = Annotated[Union[UserLogin, ServicePrincipalLogin], Field(discriminator="kind")]
