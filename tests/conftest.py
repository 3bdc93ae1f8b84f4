import pytest
from idp_provider.provider import Provider
from tests.mocks import MockIdentityProviderClient

@pytest.fixture
def mock_client():
    """
    In-memory stand-in for the Okta API.
    """
    return MockIdentityProviderClient()

@pytest.fixture
def provider():
    return Provider()

@pytest.fixture
def social_config():
    return {
        "name": "Google Login",
        "type": "GOOGLE",
        "scopes": ["profile", "email", "openid"],
        "client_id": "abcd123",
        "client_secret": "efgh456",
        "account_link_group_include": ["00g1", "00g2"],
    }

@pytest.fixture
def oidc_config():
    return {
        "name": "Corporate OIDC",
        "authorization_url": "https://idp.example.com/authorize",
        "authorization_binding": "HTTP-REDIRECT",
        "token_url": "https://idp.example.com/token",
        "token_binding": "HTTP-POST",
        "user_info_url": "https://idp.example.com/userinfo",
        "user_info_binding": "HTTP-REDIRECT",
        "jwks_url": "https://idp.example.com/keys",
        "jwks_binding": "HTTP-REDIRECT",
        "acs_binding": "HTTP-POST",
        "scopes": ["openid"],
        "client_id": "corp-client",
        "client_secret": "corp-secret",
        "issuer_url": "https://idp.example.com",
        "max_clock_skew": 120000,
    }

@pytest.fixture
def saml_config():
    return {
        "name": "Partner SAML",
        "acs_binding": "HTTP-POST",
        "acs_type": "INSTANCE",
        "sso_url": "https://partner.example.com/sso/saml",
        "sso_binding": "HTTP-POST",
        "sso_destination": "https://partner.example.com/sso/saml",
        "subject_format": ["urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress"],
        "subject_filter": "(\\S+@example\\.com)",
        "issuer": "https://partner.example.com",
        "kid": "kid-123",
        "request_signature_scope": "REQUEST",
        "response_signature_scope": "ANY",
    }
