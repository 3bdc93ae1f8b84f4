"""
Schema, payload builders and lifecycle helpers shared by every IdP resource.
"""
import logging
from contextlib import contextmanager
from typing import Dict, Optional, Type

from idp_provider.core.client.base import IdentityProviderClient, IdpT
from idp_provider.errors import OktaAPIError
from idp_provider.resources.resource import ExistsCallback, ResourceData
from idp_provider.resources.schema import FieldSchema, FieldType, build_schema
from idp_provider.schemas.idp import (
    AccountLink,
    AccountLinkFilter,
    AcsEndpoint,
    Algorithms,
    Endpoint,
    IdentityProvider,
    IdpAction,
    IdpConditions,
    IdpProvisioning,
    IdpSignature,
    Included,
    OIDCEndpoints,
    Signature,
    Subject,
    UsernameTemplate,
)

logger = logging.getLogger(__name__)

POST_BINDING_ALIAS = "HTTP-POST"
REDIRECT_BINDING_ALIAS = "HTTP-REDIRECT"

STATUS_ACTIVE = "ACTIVE"
STATUS_INACTIVE = "INACTIVE"

status_schema = FieldSchema(
    type=FieldType.STRING,
    optional=True,
    default=STATUS_ACTIVE,
    choices=(STATUS_ACTIVE, STATUS_INACTIVE),
)

action_schema = FieldSchema(type=FieldType.STRING, optional=True, default="NONE")

algorithm_schema = FieldSchema(
    type=FieldType.STRING,
    optional=True,
    default="SHA-256",
    choices=("SHA-256",),
    description="algorithm to use to sign requests",
)

opt_binding_schema = FieldSchema(type=FieldType.STRING, computed=True)

opt_url_schema = FieldSchema(type=FieldType.STRING, computed=True)

binding_schema = FieldSchema(
    type=FieldType.STRING,
    required=True,
    choices=(POST_BINDING_ALIAS, REDIRECT_BINDING_ALIAS),
)

issuer_mode_schema = FieldSchema(
    type=FieldType.STRING,
    optional=True,
    default="ORG_URL",
    choices=("ORG_URL", "CUSTOM_URL_DOMAIN"),
    description="Indicates whether Okta uses the original Okta org domain URL, or a custom domain URL",
)

url_schema = FieldSchema(type=FieldType.STRING, required=True)

acs_type_schema = FieldSchema(
    type=FieldType.STRING,
    optional=True,
    default="INSTANCE",
    choices=("INSTANCE", "ORG"),
)

base_idp_schema: Dict[str, FieldSchema] = {
    "name": FieldSchema(type=FieldType.STRING, required=True, description="name of idp"),
    "status": status_schema,
    "account_link_action": FieldSchema(type=FieldType.STRING, optional=True, default="AUTO"),
    "account_link_group_include": FieldSchema(type=FieldType.SET, optional=True),
    "provisioning_action": FieldSchema(
        type=FieldType.STRING,
        optional=True,
        default="AUTO",
        choices=("AUTO", ""),
    ),
    "deprovisioned_action": action_schema,
    "suspended_action": action_schema,
    "groups_action": action_schema,
    "username_template": FieldSchema(type=FieldType.STRING, optional=True, default="idpuser.email"),
    "subject_match_type": FieldSchema(type=FieldType.STRING, optional=True, default="USERNAME"),
    "profile_master": FieldSchema(type=FieldType.BOOL, optional=True),
    "request_signature_algorithm": algorithm_schema,
    "request_signature_scope": FieldSchema(
        type=FieldType.STRING,
        optional=True,
        choices=("REQUEST", ""),
        description="algorithm to use to sign response",
    ),
    "response_signature_algorithm": algorithm_schema,
    "response_signature_scope": FieldSchema(
        type=FieldType.STRING,
        optional=True,
        choices=("RESPONSE", "ANY", ""),
        description="algorithm to use to sign response",
    ),
}


def build_idp_schema(idp_schema: Dict[str, FieldSchema]) -> Dict[str, FieldSchema]:
    return build_schema(base_idp_schema, idp_schema)


# Builders

def new_idp_provisioning(d: ResourceData) -> IdpProvisioning:
    return IdpProvisioning(
        action=d.get("provisioning_action"),
        profile_master=d.get("profile_master"),
        conditions=IdpConditions(
            deprovisioned=IdpAction(action=d.get("deprovisioned_action")),
            suspended=IdpAction(action=d.get("suspended_action")),
        ),
        groups=IdpAction(action=d.get("groups_action")),
    )


def new_account_link(d: ResourceData) -> AccountLink:
    include = d.get("account_link_group_include")
    link_filter = None

    if include:
        link_filter = AccountLinkFilter(groups=Included(include=include))

    return AccountLink(action=d.get("account_link_action"), filter=link_filter)


def new_subject(d: ResourceData) -> Subject:
    return Subject(
        match_type=d.get("subject_match_type"),
        user_name_template=UsernameTemplate(template=d.get("username_template")),
    )


def new_algorithms(d: ResourceData) -> Optional[Algorithms]:
    request = new_signature(d, "request")
    response = new_signature(d, "response")

    if request is None and response is None:
        return None
    return Algorithms(request=request, response=response)


def new_signature(d: ResourceData, key: str) -> Optional[IdpSignature]:
    scope = d.get(f"{key}_signature_scope")

    if not scope:
        return None

    return IdpSignature(
        signature=Signature(
            algorithm=d.get(f"{key}_signature_algorithm"),
            scope=scope,
        )
    )


def new_acs(d: ResourceData) -> AcsEndpoint:
    return AcsEndpoint(binding=d.get("acs_binding"), type=d.get("acs_type"))


def get_endpoint(d: ResourceData, key: str) -> Optional[Endpoint]:
    url = d.get(f"{key}_url")

    if not url:
        return None

    return Endpoint(url=url, binding=d.get(f"{key}_binding"))


def new_endpoints(d: ResourceData) -> OIDCEndpoints:
    return OIDCEndpoints(
        acs=new_acs(d),
        authorization=get_endpoint(d, "authorization"),
        token=get_endpoint(d, "token"),
        user_info=get_endpoint(d, "user_info"),
        jwks=get_endpoint(d, "jwks"),
    )


# Flatteners

def sync_idp(d: ResourceData, idp: IdentityProvider) -> None:
    """Copy the fields every IdP variant shares back into `d`."""
    d.set("name", idp.name)
    d.set("status", idp.status)

    if idp.issuer_mode and "issuer_mode" in d.schema:
        d.set("issuer_mode", idp.issuer_mode)

    policy = getattr(idp, "policy", None)
    if policy is None:
        return

    sync_provisioning(d, policy.provisioning)
    sync_account_link(d, policy.account_link)
    sync_subject(d, policy.subject)

    protocol = getattr(idp, "protocol", None)
    if protocol is not None:
        sync_algorithms(d, protocol.algorithms)


def sync_provisioning(d: ResourceData, provisioning: Optional[IdpProvisioning]) -> None:
    if provisioning is None:
        return

    d.set("provisioning_action", provisioning.action)
    d.set("profile_master", provisioning.profile_master)

    conditions = provisioning.conditions
    if conditions is not None:
        if conditions.deprovisioned is not None:
            d.set("deprovisioned_action", conditions.deprovisioned.action)
        if conditions.suspended is not None:
            d.set("suspended_action", conditions.suspended.action)

    if provisioning.groups is not None:
        d.set("groups_action", provisioning.groups.action)


def sync_account_link(d: ResourceData, link: Optional[AccountLink]) -> None:
    if link is None:
        return

    d.set("account_link_action", link.action)

    include = []
    if link.filter is not None and link.filter.groups is not None:
        include = link.filter.groups.include
    d.set("account_link_group_include", include)


def sync_subject(d: ResourceData, subject: Optional[Subject]) -> None:
    if subject is None:
        return

    d.set("subject_match_type", subject.match_type)
    if subject.user_name_template is not None:
        d.set("username_template", subject.user_name_template.template)


def sync_algorithms(d: ResourceData, algorithms: Optional[Algorithms]) -> None:
    if algorithms is None:
        return

    for key, sig in (("request", algorithms.request), ("response", algorithms.response)):
        if sig is not None and sig.signature is not None:
            d.set(f"{key}_signature_algorithm", sig.signature.algorithm)
            d.set(f"{key}_signature_scope", sig.signature.scope)
        else:
            d.set(f"{key}_signature_scope", "")


# Lifecycle

@contextmanager
def ignore_not_found(message: str):
    """Treat a 404 inside the block as an already-satisfied request."""
    try:
        yield
    except OktaAPIError as e:
        if not e.is_not_found:
            raise
        logger.info(message)


def create_idp(client: IdentityProviderClient, idp: IdpT) -> IdpT:
    created = client.create_identity_provider(idp)
    logger.info(f"Created {created.type} identity provider {created.id}")
    return created


def fetch_idp(client: IdentityProviderClient, idp_id: str, model: Type[IdpT]) -> Optional[IdpT]:
    """Returns None when the service no longer knows `idp_id`."""
    try:
        return client.get_identity_provider(idp_id, model)
    except OktaAPIError as e:
        if e.is_not_found:
            return None
        raise


def update_idp(client: IdentityProviderClient, idp_id: str, idp: IdpT) -> Optional[IdpT]:
    try:
        updated = client.update_identity_provider(idp_id, idp)
    except OktaAPIError as e:
        # Removed outside of our control; the read that follows drops it from state
        if e.is_not_found:
            logger.info(f"Identity provider {idp_id} not found on update")
            return None
        raise

    logger.info(f"Updated identity provider {idp_id}")
    return updated


def set_idp_status(client: IdentityProviderClient, idp_id: str, status: Optional[str], desired_status: str) -> None:
    if status == desired_status:
        return

    if desired_status == STATUS_INACTIVE:
        logger.info(f"Deactivating identity provider {idp_id}")
        client.deactivate_identity_provider(idp_id)
    elif desired_status == STATUS_ACTIVE:
        logger.info(f"Activating identity provider {idp_id}")
        client.activate_identity_provider(idp_id)


def resource_idp_delete(d: ResourceData, client: IdentityProviderClient) -> None:
    delete_any_idp(client, d.id, d.get("status") == STATUS_ACTIVE)


def delete_any_idp(client: IdentityProviderClient, idp_id: str, active: bool) -> None:
    if active:
        with ignore_not_found(f"Identity provider {idp_id} already gone, skipping deactivation"):
            client.deactivate_identity_provider(idp_id)

    with ignore_not_found(f"Identity provider {idp_id} already deleted"):
        client.delete_identity_provider(idp_id)
        logger.info(f"Deleted identity provider {idp_id}")


def identity_provider_exists(model: Type[IdentityProvider]) -> ExistsCallback:
    def exists(d: ResourceData, client: IdentityProviderClient) -> bool:
        return fetch_idp(client, d.id, model) is not None

    return exists
