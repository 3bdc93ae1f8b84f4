import logging

from idp_provider.core.client.base import IdentityProviderClient
from idp_provider.resources.idp import (
    build_idp_schema,
    create_idp,
    fetch_idp,
    identity_provider_exists,
    issuer_mode_schema,
    new_account_link,
    new_idp_provisioning,
    new_subject,
    opt_binding_schema,
    opt_url_schema,
    resource_idp_delete,
    set_idp_status,
    sync_idp,
    update_idp,
)
from idp_provider.resources.resource import Resource, ResourceData, import_state_passthrough
from idp_provider.resources.schema import FieldSchema, FieldType
from idp_provider.schemas.idp import (
    OIDCClient,
    OIDCCredentials,
    OIDCIdentityProvider,
    OIDCProtocol,
    Policy,
)

logger = logging.getLogger(__name__)

SOCIAL_TYPES = ("OIDC", "FACEBOOK", "LINKEDIN", "MICROSOFT", "GOOGLE")

def resource_social_idp() -> Resource:
    return Resource(
        create=resource_social_idp_create,
        read=resource_social_idp_read,
        update=resource_social_idp_update,
        delete=resource_idp_delete,
        exists=identity_provider_exists(OIDCIdentityProvider),
        importer=import_state_passthrough,
        schema=build_idp_schema({
            "authorization_url": opt_url_schema,
            "authorization_binding": opt_binding_schema,
            "token_url": opt_url_schema,
            "token_binding": opt_binding_schema,
            "type": FieldSchema(type=FieldType.STRING, required=True, choices=SOCIAL_TYPES),
            "scopes": FieldSchema(type=FieldType.SET, required=True),
            "protocol_type": FieldSchema(
                type=FieldType.STRING,
                optional=True,
                default="OIDC",
                choices=("OIDC", "OAUTH2"),
            ),
            "client_id": FieldSchema(type=FieldType.STRING, optional=True),
            "client_secret": FieldSchema(type=FieldType.STRING, optional=True, sensitive=True),
            "max_clock_skew": FieldSchema(type=FieldType.INT, optional=True),
            "issuer_mode": issuer_mode_schema,
        }),
    )


def resource_social_idp_create(d: ResourceData, client: IdentityProviderClient) -> None:
    idp = build_social_idp(d)
    created = create_idp(client, idp)
    d.set_id(created.id)

    set_idp_status(client, created.id, created.status, d.get("status"))

    resource_social_idp_read(d, client)


def resource_social_idp_read(d: ResourceData, client: IdentityProviderClient) -> None:
    idp = fetch_idp(client, d.id, OIDCIdentityProvider)
    if idp is None:
        logger.info(f"Social identity provider {d.id} not found, removing from state")
        d.set_id("")
        return

    sync_idp(d, idp)
    d.set("type", idp.type)

    if idp.policy is not None:
        d.set("max_clock_skew", idp.policy.max_clock_skew)

    protocol = idp.protocol or OIDCProtocol()
    d.set("protocol_type", protocol.type)
    d.set("scopes", protocol.scopes)

    if protocol.credentials is not None and protocol.credentials.client is not None:
        d.set("client_id", protocol.credentials.client.client_id)
        d.set("client_secret", protocol.credentials.client.client_secret)

    # Okta fills in the provider's well-known endpoints
    endpoints = protocol.endpoints
    if endpoints is not None:
        if endpoints.authorization is not None:
            d.set("authorization_url", endpoints.authorization.url)
            d.set("authorization_binding", endpoints.authorization.binding)
        if endpoints.token is not None:
            d.set("token_url", endpoints.token.url)
            d.set("token_binding", endpoints.token.binding)


def resource_social_idp_update(d: ResourceData, client: IdentityProviderClient) -> None:
    idp = build_social_idp(d)

    updated = update_idp(client, d.id, idp)
    if updated is not None:
        set_idp_status(client, d.id, updated.status, d.get("status"))

    resource_social_idp_read(d, client)


def build_social_idp(d: ResourceData) -> OIDCIdentityProvider:
    return OIDCIdentityProvider(
        name=d.get("name"),
        type=d.get("type"),
        issuer_mode=d.get("issuer_mode"),
        policy=Policy(
            account_link=new_account_link(d),
            max_clock_skew=d.get("max_clock_skew"),
            provisioning=new_idp_provisioning(d),
            subject=new_subject(d),
        ),
        protocol=OIDCProtocol(
            scopes=d.get("scopes"),
            type=d.get("protocol_type"),
            credentials=OIDCCredentials(
                client=OIDCClient(
                    client_id=d.get("client_id"),
                    client_secret=d.get("client_secret"),
                )
            ),
        ),
    )
