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
    new_acs,
    new_algorithms,
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
    Policy,
    SAMLCredentials,
    SAMLEndpoints,
    SAMLIdentityProvider,
    SAMLProtocol,
    SAMLSettings,
    SAMLTrust,
    SsoEndpoint,
    Subject,
)

logger = logging.getLogger(__name__)

SAML_TYPE = "SAML2"
DEFAULT_NAME_FORMAT = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"

def resource_saml_idp() -> Resource:
    return Resource(
        create=resource_saml_idp_create,
        read=resource_saml_idp_read,
        update=resource_saml_idp_update,
        delete=resource_idp_delete,
        exists=identity_provider_exists(SAMLIdentityProvider),
        importer=import_state_passthrough,
        schema=build_idp_schema({
            "acs_binding": binding_schema,
            "acs_type": acs_type_schema,
            "sso_url": url_schema,
            "sso_binding": binding_schema,
            "sso_destination": FieldSchema(type=FieldType.STRING, optional=True),
            "name_format": FieldSchema(type=FieldType.STRING, optional=True, default=DEFAULT_NAME_FORMAT),
            "subject_format": FieldSchema(type=FieldType.SET, optional=True),
            "subject_filter": FieldSchema(type=FieldType.STRING, optional=True),
            "issuer": url_schema,
            "issuer_mode": issuer_mode_schema,
            "audience": FieldSchema(type=FieldType.STRING, computed=True),
            "kid": FieldSchema(type=FieldType.STRING, required=True),
        }),
    )


def resource_saml_idp_create(d: ResourceData, client: IdentityProviderClient) -> None:
    created = create_idp(client, build_saml_idp(d))
    d.set_id(created.id)

    set_idp_status(client, created.id, created.status, d.get("status"))

    resource_saml_idp_read(d, client)


def resource_saml_idp_read(d: ResourceData, client: IdentityProviderClient) -> None:
    idp = fetch_idp(client, d.id, SAMLIdentityProvider)
    if idp is None:
        logger.info(f"SAML identity provider {d.id} not found, removing from state")
        d.set_id("")
        return

    sync_idp(d, idp)

    if idp.policy is not None and idp.policy.subject is not None:
        subject = idp.policy.subject
        d.set("subject_filter", subject.filter)
        d.set("subject_format", subject.format)

    protocol = idp.protocol
    if protocol is None:
        return

    if protocol.settings is not None:
        d.set("name_format", protocol.settings.name_format)

    if protocol.credentials is not None and protocol.credentials.trust is not None:
        trust = protocol.credentials.trust
        d.set("issuer", trust.issuer)
        d.set("audience", trust.audience)
        d.set("kid", trust.kid)

    endpoints = protocol.endpoints
    if endpoints is None:
        return

    if endpoints.acs is not None:
        d.set("acs_binding", endpoints.acs.binding)
        d.set("acs_type", endpoints.acs.type)

    if endpoints.sso is not None:
        d.set("sso_url", endpoints.sso.url)
        d.set("sso_binding", endpoints.sso.binding)
        d.set("sso_destination", endpoints.sso.destination)


def resource_saml_idp_update(d: ResourceData, client: IdentityProviderClient) -> None:
    updated = update_idp(client, d.id, build_saml_idp(d))
    if updated is not None:
        set_idp_status(client, d.id, updated.status, d.get("status"))

    resource_saml_idp_read(d, client)


def new_saml_subject(d: ResourceData) -> Subject:
    subject = new_subject(d)
    subject.filter = d.get("subject_filter") or None
    subject.format = d.get("subject_format") or None
    return subject


def build_saml_idp(d: ResourceData) -> SAMLIdentityProvider:
    return SAMLIdentityProvider(
        name=d.get("name"),
        type=SAML_TYPE,
        issuer_mode=d.get("issuer_mode"),
        policy=Policy(
            account_link=new_account_link(d),
            provisioning=new_idp_provisioning(d),
            subject=new_saml_subject(d),
        ),
        protocol=SAMLProtocol(
            type=SAML_TYPE,
            algorithms=new_algorithms(d),
            endpoints=SAMLEndpoints(
                acs=new_acs(d),
                sso=SsoEndpoint(
                    url=d.get("sso_url"),
                    binding=d.get("sso_binding"),
                    destination=d.get("sso_destination") or None,
                ),
            ),
            settings=SAMLSettings(name_format=d.get("name_format")),
            credentials=SAMLCredentials(
                trust=SAMLTrust(
                    issuer=d.get("issuer"),
                    kid=d.get("kid"),
                )
            ),
        ),
    )
