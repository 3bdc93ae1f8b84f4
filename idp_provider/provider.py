import logging
from typing import Dict, Optional

from idp_provider.config import Settings, settings as default_settings
from idp_provider.core.client.base import IdentityProviderClient
from idp_provider.core.client.okta import OktaClient, get_client
from idp_provider.resources.oidc_idp import resource_oidc_idp
from idp_provider.resources.resource import Resource
from idp_provider.resources.saml_idp import resource_saml_idp
from idp_provider.resources.social_idp import resource_social_idp

logger = logging.getLogger(__name__)

class Provider:
    """
    Entry point handed to the host: the resource types it can manage and the
    client every lifecycle callback receives.
    """

    def __init__(self):
        self.resources_map: Dict[str, Resource] = {
            "okta_idp_oidc": resource_oidc_idp(),
            "okta_idp_saml": resource_saml_idp(),
            "okta_idp_social": resource_social_idp(),
        }

    def resource(self, name: str) -> Resource:
        try:
            return self.resources_map[name]
        except KeyError:
            raise KeyError(f"unknown resource type {name!r}") from None

    def configure(self, config: Optional[Settings] = None) -> IdentityProviderClient:
        if config is None:
            return get_client()

        logger.debug(f"Configuring provider for {config.org_url}")
        return OktaClient(
            org_url=config.org_url,
            api_token=config.OKTA_API_TOKEN,
            timeout=config.OKTA_HTTP_TIMEOUT,
        )


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or default_settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
