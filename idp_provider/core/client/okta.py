import logging
from typing import Any, Dict, Optional, Type

import httpx

from idp_provider.config import settings
from idp_provider.core.client.base import IdentityProviderClient, IdpT
from idp_provider.errors import OktaAPIError

logger = logging.getLogger(__name__)

USER_AGENT = "okta-idp-provider/1.0.0"

class OktaClient(IdentityProviderClient):
    def __init__(
        self,
        org_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.org_url = (org_url or settings.org_url).rstrip("/")
        self.api_token = api_token if api_token is not None else settings.OKTA_API_TOKEN

        # transport is only overridden by tests (httpx.MockTransport)
        self._http = httpx.Client(
            base_url=self.org_url,
            headers={
                "Authorization": f"SSWS {self.api_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout if timeout is not None else settings.OKTA_HTTP_TIMEOUT,
            transport=transport,
        )

        logger.debug(f"Initialized OktaClient for {self.org_url}")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "OktaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> httpx.Response:
        response = self._http.request(method, path, json=body)
        logger.debug(f"{method} {path} -> {response.status_code}")

        if response.is_error:
            raise OktaAPIError.from_response(response)
        return response

    def create_identity_provider(self, idp: IdpT) -> IdpT:
        response = self._request("POST", "/api/v1/idps", idp.to_payload())
        return type(idp).model_validate(response.json())

    def get_identity_provider(self, idp_id: str, model: Type[IdpT]) -> IdpT:
        response = self._request("GET", f"/api/v1/idps/{idp_id}")
        return model.model_validate(response.json())

    def update_identity_provider(self, idp_id: str, idp: IdpT) -> IdpT:
        response = self._request("PUT", f"/api/v1/idps/{idp_id}", idp.to_payload())
        return type(idp).model_validate(response.json())

    def delete_identity_provider(self, idp_id: str) -> None:
        self._request("DELETE", f"/api/v1/idps/{idp_id}")

    def activate_identity_provider(self, idp_id: str) -> None:
        self._request("POST", f"/api/v1/idps/{idp_id}/lifecycle/activate")

    def deactivate_identity_provider(self, idp_id: str) -> None:
        self._request("POST", f"/api/v1/idps/{idp_id}/lifecycle/deactivate")


_client = None

def get_client() -> IdentityProviderClient:
    global _client
    if not _client:
        _client = OktaClient()
    return _client
