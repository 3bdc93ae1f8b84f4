import pytest
from idp_provider.resources.idp import (
    get_endpoint,
    new_account_link,
    new_algorithms,
    new_idp_provisioning,
    new_signature,
)
from idp_provider.resources.oidc_idp import build_oidc_idp
from idp_provider.resources.saml_idp import build_saml_idp
from idp_provider.resources.social_idp import build_social_idp


def test_social_payload_structure(provider, social_config):
    d = provider.resource("okta_idp_social").data(config=social_config)

    assert build_social_idp(d).to_payload() == {
        "name": "Google Login",
        "type": "GOOGLE",
        "issuerMode": "ORG_URL",
        "policy": {
            "provisioning": {
                "action": "AUTO",
                "profileMaster": False,
                "conditions": {
                    "deprovisioned": {"action": "NONE"},
                    "suspended": {"action": "NONE"},
                },
                "groups": {"action": "NONE"},
            },
            "accountLink": {
                "action": "AUTO",
                "filter": {"groups": {"include": ["00g1", "00g2"]}},
            },
            "subject": {
                "userNameTemplate": {"template": "idpuser.email"},
                "matchType": "USERNAME",
            },
            "maxClockSkew": 0,
        },
        "protocol": {
            "type": "OIDC",
            "scopes": ["profile", "email", "openid"],
            "credentials": {"client": {"client_id": "abcd123", "client_secret": "efgh456"}},
        },
    }


def test_account_link_without_groups_has_no_filter(provider, social_config):
    del social_config["account_link_group_include"]
    social_config["account_link_action"] = "DISABLED"
    d = provider.resource("okta_idp_social").data(config=social_config)

    link = new_account_link(d)
    assert link.model_dump(by_alias=True, exclude_none=True) == {"action": "DISABLED"}


def test_provisioning_uses_declared_actions(provider, social_config):
    social_config.update({
        "provisioning_action": "",
        "deprovisioned_action": "REACTIVATE",
        "suspended_action": "UNSUSPEND",
        "groups_action": "SYNC",
        "profile_master": True,
    })
    d = provider.resource("okta_idp_social").data(config=social_config)

    provisioning = new_idp_provisioning(d)
    assert provisioning.action == ""
    assert provisioning.profile_master is True
    assert provisioning.conditions.deprovisioned.action == "REACTIVATE"
    assert provisioning.conditions.suspended.action == "UNSUSPEND"
    assert provisioning.groups.action == "SYNC"


def test_signature_omitted_without_scope(provider, saml_config):
    del saml_config["request_signature_scope"]
    del saml_config["response_signature_scope"]
    d = provider.resource("okta_idp_saml").data(config=saml_config)

    assert new_signature(d, "request") is None
    assert new_signature(d, "response") is None
    assert new_algorithms(d) is None


def test_algorithms_carry_scope_and_default_algorithm(provider, saml_config):
    del saml_config["response_signature_scope"]
    d = provider.resource("okta_idp_saml").data(config=saml_config)

    algorithms = new_algorithms(d)
    assert algorithms.model_dump(by_alias=True, exclude_none=True) == {
        "request": {"signature": {"algorithm": "SHA-256", "scope": "REQUEST"}},
    }


def test_oidc_endpoints(provider, oidc_config):
    del oidc_config["user_info_url"]
    del oidc_config["user_info_binding"]
    d = provider.resource("okta_idp_oidc").data(config=oidc_config)

    assert get_endpoint(d, "user_info") is None

    payload = build_oidc_idp(d).to_payload()
    assert payload["type"] == "OIDC"
    assert payload["policy"]["maxClockSkew"] == 120000
    assert payload["protocol"]["issuer"] == {"url": "https://idp.example.com"}
    assert payload["protocol"]["endpoints"] == {
        "acs": {"binding": "HTTP-POST", "type": "INSTANCE"},
        "authorization": {"url": "https://idp.example.com/authorize", "binding": "HTTP-REDIRECT"},
        "token": {"url": "https://idp.example.com/token", "binding": "HTTP-POST"},
        "jwks": {"url": "https://idp.example.com/keys", "binding": "HTTP-REDIRECT"},
    }
    assert "algorithms" not in payload["protocol"]


def test_saml_payload_structure(provider, saml_config):
    d = provider.resource("okta_idp_saml").data(config=saml_config)

    payload = build_saml_idp(d).to_payload()
    assert payload["type"] == "SAML2"
    assert payload["policy"]["subject"] == {
        "userNameTemplate": {"template": "idpuser.email"},
        "matchType": "USERNAME",
        "filter": "(\\S+@example\\.com)",
        "format": ["urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress"],
    }
    assert "maxClockSkew" not in payload["policy"]
    assert payload["protocol"] == {
        "type": "SAML2",
        "algorithms": {
            "request": {"signature": {"algorithm": "SHA-256", "scope": "REQUEST"}},
            "response": {"signature": {"algorithm": "SHA-256", "scope": "ANY"}},
        },
        "endpoints": {
            "sso": {
                "url": "https://partner.example.com/sso/saml",
                "binding": "HTTP-POST",
                "destination": "https://partner.example.com/sso/saml",
            },
            "acs": {"binding": "HTTP-POST", "type": "INSTANCE"},
        },
        "settings": {"nameFormat": "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"},
        "credentials": {"trust": {"issuer": "https://partner.example.com", "kid": "kid-123"}},
    }


@pytest.mark.parametrize("resource_type", ["okta_idp_social", "okta_idp_oidc", "okta_idp_saml"])
def test_builders_have_no_side_effects(provider, mock_client, resource_type, social_config, oidc_config, saml_config):
    config = {
        "okta_idp_social": social_config,
        "okta_idp_oidc": oidc_config,
        "okta_idp_saml": saml_config,
    }[resource_type]
    builder = {
        "okta_idp_social": build_social_idp,
        "okta_idp_oidc": build_oidc_idp,
        "okta_idp_saml": build_saml_idp,
    }[resource_type]
    d = provider.resource(resource_type).data(config=config)

    assert builder(d) == builder(d)
    assert d.id == ""
    assert mock_client.calls == []
