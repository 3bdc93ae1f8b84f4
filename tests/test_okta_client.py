import json
import httpx
import pytest
from idp_provider.core.client.okta import OktaClient
from idp_provider.errors import OktaAPIError
from idp_provider.schemas.idp import OIDCIdentityProvider, SAMLIdentityProvider

SOCIAL_IDP = {
    "id": "0oa62b57p7c8PaGpU0h7",
    "type": "GOOGLE",
    "name": "Google Login",
    "status": "ACTIVE",
    "created": "2016-03-24T23:21:49.000Z",
    "lastUpdated": "2016-03-24T23:21:49.000Z",
    "protocol": {
        "type": "OIDC",
        "endpoints": {
            "authorization": {
                "url": "https://accounts.google.com/o/oauth2/auth",
                "binding": "HTTP-REDIRECT",
            },
            "token": {
                "url": "https://www.googleapis.com/oauth2/v3/token",
                "binding": "HTTP-POST",
            },
        },
        "scopes": ["profile", "email", "openid"],
        "credentials": {"client": {"client_id": "abcd123", "client_secret": "efgh456"}},
    },
    "policy": {
        "provisioning": {
            "action": "AUTO",
            "profileMaster": True,
            "groups": {"action": "NONE"},
            "conditions": {"deprovisioned": {"action": "NONE"}, "suspended": {"action": "NONE"}},
        },
        "accountLink": {"filter": None, "action": "AUTO"},
        "subject": {"userNameTemplate": {"template": "idpuser.email"}, "matchType": "USERNAME"},
        "maxClockSkew": 0,
    },
    "_links": {"authorize": {"href": "https://example.okta.com/oauth2/v1/authorize?idp=0oa62b57p7c8PaGpU0h7"}},
}


@pytest.fixture
def recorder():
    """
    Returns (requests, make_client); make_client takes a handler returning httpx.Response.
    """
    requests = []

    def make_client(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return OktaClient(
            org_url="https://example.okta.com/",
            api_token="test-token",
            timeout=5,
            transport=httpx.MockTransport(_record),
        )

    return requests, make_client


def test_get_sends_ssws_token(recorder):
    requests, make_client = recorder
    with make_client(lambda request: httpx.Response(200, json=SOCIAL_IDP)) as client:
        idp = client.get_identity_provider("0oa62b57p7c8PaGpU0h7", OIDCIdentityProvider)

    request = requests[0]
    assert request.method == "GET"
    assert str(request.url) == "https://example.okta.com/api/v1/idps/0oa62b57p7c8PaGpU0h7"
    assert request.headers["Authorization"] == "SSWS test-token"
    assert request.headers["Accept"] == "application/json"

    assert idp.id == "0oa62b57p7c8PaGpU0h7"
    assert idp.policy.provisioning.profile_master is True
    assert idp.protocol.endpoints.token.binding == "HTTP-POST"
    assert idp.protocol.credentials.client.client_secret == "efgh456"


def test_create_posts_camel_case_payload(recorder):
    requests, make_client = recorder
    client = make_client(lambda request: httpx.Response(200, json=SOCIAL_IDP))

    created = client.create_identity_provider(
        OIDCIdentityProvider.model_validate({
            "type": "GOOGLE",
            "name": "Google Login",
            "issuerMode": "ORG_URL",
            "policy": {"maxClockSkew": 0, "accountLink": {"action": "AUTO"}},
        })
    )

    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/v1/idps"
    assert json.loads(request.content) == {
        "type": "GOOGLE",
        "name": "Google Login",
        "issuerMode": "ORG_URL",
        "policy": {"maxClockSkew": 0, "accountLink": {"action": "AUTO"}},
    }
    assert isinstance(created, OIDCIdentityProvider)
    assert created.id == "0oa62b57p7c8PaGpU0h7"


def test_update_puts_to_idp(recorder):
    requests, make_client = recorder
    client = make_client(lambda request: httpx.Response(200, json={"id": "0oa1", "type": "SAML2", "status": "ACTIVE"}))

    updated = client.update_identity_provider("0oa1", SAMLIdentityProvider(name="Partner", type="SAML2"))

    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/v1/idps/0oa1"
    assert isinstance(updated, SAMLIdentityProvider)


@pytest.mark.parametrize("method, path", [
    ("activate_identity_provider", "/api/v1/idps/0oa1/lifecycle/activate"),
    ("deactivate_identity_provider", "/api/v1/idps/0oa1/lifecycle/deactivate"),
])
def test_lifecycle_endpoints(recorder, method, path):
    requests, make_client = recorder
    client = make_client(lambda request: httpx.Response(200, json={"id": "0oa1"}))

    getattr(client, method)("0oa1")

    assert requests[0].method == "POST"
    assert requests[0].url.path == path


def test_delete(recorder):
    requests, make_client = recorder
    client = make_client(lambda request: httpx.Response(204))

    client.delete_identity_provider("0oa1")

    assert requests[0].method == "DELETE"
    assert requests[0].url.path == "/api/v1/idps/0oa1"


def test_not_found_raises_with_okta_error_body(recorder):
    _, make_client = recorder
    body = {
        "errorCode": "E0000007",
        "errorSummary": "Not found: Resource not found: 0oa1 (IdentityProvider)",
        "errorLink": "E0000007",
        "errorId": "oaeXYZ",
        "errorCauses": [],
    }
    client = make_client(lambda request: httpx.Response(404, json=body))

    with pytest.raises(OktaAPIError) as exc_info:
        client.get_identity_provider("0oa1", OIDCIdentityProvider)

    error = exc_info.value
    assert error.is_not_found
    assert error.error_code == "E0000007"
    assert "Resource not found" in str(error)
    assert "HTTP status code: 404" in str(error)


def test_validation_error_lists_causes(recorder):
    _, make_client = recorder
    body = {
        "errorCode": "E0000001",
        "errorSummary": "Api validation failed: name",
        "errorCauses": [{"errorSummary": "name: An object with this field already exists."}],
    }
    client = make_client(lambda request: httpx.Response(400, json=body))

    with pytest.raises(OktaAPIError) as exc_info:
        client.create_identity_provider(OIDCIdentityProvider(name="dup", type="GOOGLE"))

    assert not exc_info.value.is_not_found
    assert "An object with this field already exists" in str(exc_info.value)


def test_non_json_error_body(recorder):
    _, make_client = recorder
    client = make_client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(OktaAPIError) as exc_info:
        client.delete_identity_provider("0oa1")

    assert exc_info.value.status_code == 502
    assert exc_info.value.error_summary == "Bad Gateway"
