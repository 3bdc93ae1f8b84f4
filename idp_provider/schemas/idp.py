from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime

class OktaModel(BaseModel):
    class Config:
        populate_by_name = True

# Policy

class IdpAction(OktaModel):
    action: Optional[str] = None

class IdpConditions(OktaModel):
    deprovisioned: Optional[IdpAction] = None
    suspended: Optional[IdpAction] = None

class IdpProvisioning(OktaModel):
    action: Optional[str] = None
    profile_master: Optional[bool] = Field(default=None, alias="profileMaster")
    conditions: Optional[IdpConditions] = None
    groups: Optional[IdpAction] = None

class Included(OktaModel):
    include: List[str] = []

class AccountLinkFilter(OktaModel):
    groups: Optional[Included] = None

class AccountLink(OktaModel):
    action: Optional[str] = None
    filter: Optional[AccountLinkFilter] = None

class UsernameTemplate(OktaModel):
    template: Optional[str] = None

class Subject(OktaModel):
    user_name_template: Optional[UsernameTemplate] = Field(default=None, alias="userNameTemplate")
    match_type: Optional[str] = Field(default=None, alias="matchType")
    filter: Optional[str] = None
    format: Optional[List[str]] = None

class Policy(OktaModel):
    provisioning: Optional[IdpProvisioning] = None
    account_link: Optional[AccountLink] = Field(default=None, alias="accountLink")
    subject: Optional[Subject] = None
    max_clock_skew: Optional[int] = Field(default=None, alias="maxClockSkew")

# Protocol

class Signature(OktaModel):
    algorithm: Optional[str] = None
    scope: Optional[str] = None

class IdpSignature(OktaModel):
    signature: Optional[Signature] = None

class Algorithms(OktaModel):
    request: Optional[IdpSignature] = None
    response: Optional[IdpSignature] = None

class Endpoint(OktaModel):
    url: Optional[str] = None
    binding: Optional[str] = None

class AcsEndpoint(OktaModel):
    binding: Optional[str] = None
    type: Optional[str] = None

class SsoEndpoint(OktaModel):
    url: Optional[str] = None
    binding: Optional[str] = None
    destination: Optional[str] = None

class OIDCEndpoints(OktaModel):
    acs: Optional[AcsEndpoint] = None
    authorization: Optional[Endpoint] = None
    token: Optional[Endpoint] = None
    user_info: Optional[Endpoint] = Field(default=None, alias="userInfo")
    jwks: Optional[Endpoint] = None

class OIDCClient(OktaModel):
    # Okta keeps these two in snake_case on the wire
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

class OIDCCredentials(OktaModel):
    client: Optional[OIDCClient] = None

class Issuer(OktaModel):
    url: Optional[str] = None

class OIDCProtocol(OktaModel):
    type: Optional[str] = None
    scopes: Optional[List[str]] = None
    endpoints: Optional[OIDCEndpoints] = None
    credentials: Optional[OIDCCredentials] = None
    issuer: Optional[Issuer] = None
    algorithms: Optional[Algorithms] = None

class SAMLEndpoints(OktaModel):
    sso: Optional[SsoEndpoint] = None
    acs: Optional[AcsEndpoint] = None

class SAMLTrust(OktaModel):
    issuer: Optional[str] = None
    audience: Optional[str] = None
    kid: Optional[str] = None

class SAMLCredentials(OktaModel):
    trust: Optional[SAMLTrust] = None

class SAMLSettings(OktaModel):
    name_format: Optional[str] = Field(default=None, alias="nameFormat")

class SAMLProtocol(OktaModel):
    type: Optional[str] = None
    endpoints: Optional[SAMLEndpoints] = None
    algorithms: Optional[Algorithms] = None
    settings: Optional[SAMLSettings] = None
    credentials: Optional[SAMLCredentials] = None

# Identity providers

class IdentityProvider(OktaModel):
    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    issuer_mode: Optional[str] = Field(default=None, alias="issuerMode")
    created: Optional[datetime] = None
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    def to_payload(self) -> Dict[str, Any]:
        """Request body for create/update; server-owned fields are left out."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"id", "created", "last_updated"},
        )

class OIDCIdentityProvider(IdentityProvider):
    policy: Optional[Policy] = None
    protocol: Optional[OIDCProtocol] = None

class SAMLIdentityProvider(IdentityProvider):
    policy: Optional[Policy] = None
    protocol: Optional[SAMLProtocol] = None
