import logging

from idp_provider.core.client.base import IdentityProviderClient
from idp_provider.resources.idp import (
    acs_type_schema,
    binding_schema,
    build_idp_schema,
    create_idp,
    fetch_idp,
    identity_provider_exists,
    issuer_mode_schema,
    new_account_link,
    new_algorithms,
    new_endpoints,
    new_idp_provisioning,
    new_subject,
    resource_idp_delete,
    set_idp_status,
    sync_idp,
    update_idp,
    url_schema,
)
from idp_provider.resources.resource import Resource, ResourceData, import_state_passthrough
from idp_provider.resources.schema import FieldSchema, FieldType
from idp_provider.schemas.idp import (
    Issuer,
    OIDCClient,
    OIDCCredentials,
    OIDCIdentityProvider,
    OIDCProtocol,
    Policy,
)

logger = logging.getLogger(__name__)

def resource_oidc_idp() -> Resource:
    return Resource(
        create=resource_oidc_idp_create,
        read=resource_oidc_idp_read,
        update=resource_oidc_idp_update,
        delete=resource_idp_delete,
        exists=identity_provider_exists(OIDCIdentityProvider),
        importer=import_state_passthrough,
        schema=build_idp_schema({
            "authorization_url": url_schema,
            "authorization_binding": binding_schema,
            "token_url": url_schema,
            "token_binding": binding_schema,
            "user_info_url": FieldSchema(type=FieldType.STRING, optional=True),
            "user_info_binding": FieldSchema(
                type=FieldType.STRING,
                optional=True,
                choices=binding_schema.choices,
            ),
            "jwks_url": url_schema,
            "jwks_binding": binding_schema,
            "acs_binding": binding_schema,
            "acs_type": acs_type_schema,
            "scopes": FieldSchema(type=FieldType.SET, required=True),
            "protocol_type": FieldSchema(
                type=FieldType.STRING,
                optional=True,
                default="OIDC",
                choices=("OIDC", "OAUTH2"),
            ),
            "client_id": FieldSchema(type=FieldType.STRING, required=True),
            "client_secret": FieldSchema(type=FieldType.STRING, required=True, sensitive=True),
            "issuer_url": url_schema,
            "issuer_mode": issuer_mode_schema,
            "max_clock_skew": FieldSchema(type=FieldType.INT, optional=True),
        }),
    )


def resource_oidc_idp_create(d: ResourceData, client: IdentityProviderClient) -> None:
    created = create_idp(client, build_oidc_idp(d))
    d.set_id(created.id)

    set_idp_status(client, created.id, created.status, d.get("status"))

    resource_oidc_idp_read(d, client)


def resource_oidc_idp_read(d: ResourceData, client: IdentityProviderClient) -> None:
    idp = fetch_idp(client, d.id, OIDCIdentityProvider)
    if idp is None:
        logger.info(f"OIDC identity provider {d.id} not found, removing from state")
        d.set_id("")
        return

    sync_idp(d, idp)

    if idp.policy is not None:
        d.set("max_clock_skew", idp.policy.max_clock_skew)

    protocol = idp.protocol
    if protocol is None:
        return

    d.set("protocol_type", protocol.type)
    d.set("scopes", protocol.scopes)

    if protocol.issuer is not None:
        d.set("issuer_url", protocol.issuer.url)

    if protocol.credentials is not None and protocol.credentials.client is not None:
        d.set("client_id", protocol.credentials.client.client_id)
        d.set("client_secret", protocol.credentials.client.client_secret)

    endpoints = protocol.endpoints
    if endpoints is None:
        return

    if endpoints.acs is not None:
        d.set("acs_binding", endpoints.acs.binding)
        d.set("acs_type", endpoints.acs.type)

    for key, endpoint in (
        ("authorization", endpoints.authorization),
        ("token", endpoints.token),
        ("user_info", endpoints.user_info),
        ("jwks", endpoints.jwks),
    ):
        if endpoint is not None:
            d.set(f"{key}_url", endpoint.url)
            d.set(f"{key}_binding", endpoint.binding)


def resource_oidc_idp_update(d: ResourceData, client: IdentityProviderClient) -> None:
    updated = update_idp(client, d.id, build_oidc_idp(d))
    if updated is not None:
        set_idp_status(client, d.id, updated.status, d.get("status"))

    resource_oidc_idp_read(d, client)


def build_oidc_idp(d: ResourceData) -> OIDCIdentityProvider:
    return OIDCIdentityProvider(
        name=d.get("name"),
        type="OIDC",
        issuer_mode=d.get("issuer_mode"),
        policy=Policy(
            account_link=new_account_link(d),
            max_clock_skew=d.get("max_clock_skew"),
            provisioning=new_idp_provisioning(d),
            subject=new_subject(d),
        ),
        protocol=OIDCProtocol(
            type=d.get("protocol_type"),
            scopes=d.get("scopes"),
            endpoints=new_endpoints(d),
            algorithms=new_algorithms(d),
            issuer=Issuer(url=d.get("issuer_url")),
            credentials=OIDCCredentials(
                client=OIDCClient(
                    client_id=d.get("client_id"),
                    client_secret=d.get("client_secret"),
                )
            ),
        ),
    )
