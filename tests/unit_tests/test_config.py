import pytest

from requests_auth0 import (
    ClientConfig,
    InvalidConfig,
    InvalidDomain,
    InvalidEndpointUri,
    UnknownConfigKeys,
    UnsupportedIdTokenAlg,
    normalize_domain,
)


@pytest.mark.parametrize(
    ("domain", "expected"),
    [
        ("mytenant", "mytenant.auth0.com"),
        ("mytenant.eu", "mytenant.eu.auth0.com"),
        ("mytenant.us", "mytenant.us.auth0.com"),
        ("mytenant.au", "mytenant.au.auth0.com"),
        ("mytenant.jp", "mytenant.jp.auth0.com"),
        ("mytenant.eu.auth0.com", "mytenant.eu.auth0.com"),
        ("https://mytenant.eu.auth0.com", "mytenant.eu.auth0.com"),
        ("https://mytenant.eu.auth0.com/", "mytenant.eu.auth0.com"),
        ("login.example.com", "login.example.com"),
    ],
)
def test_normalize_domain(domain: str, expected: str) -> None:
    assert normalize_domain(domain) == expected


@pytest.mark.parametrize(
    "domain",
    ["", "http://mytenant.auth0.com", "https://mytenant.auth0.com/some/path", "https://"],
)
def test_invalid_domain(domain: str) -> None:
    with pytest.raises(InvalidDomain):
        normalize_domain(domain)
    with pytest.raises(InvalidConfig):
        ClientConfig(domain, "client_id")


def test_config_defaults() -> None:
    config = ClientConfig("mytenant.eu", "client_id", "client_secret")
    assert config.domain == "mytenant.eu.auth0.com"
    assert config.client_id == "client_id"
    assert config.client_secret == "client_secret"
    assert config.redirect_uri is None
    assert config.scope == "openid profile email"
    assert config.audience is None
    assert config.skip_userinfo is False
    assert config.persist_user is True
    assert config.persist_access_token is False
    assert config.persist_refresh_token is False
    assert config.persist_id_token is False
    assert config.id_token_alg == "RS256"
    assert config.id_token_leeway == 60
    assert config.timeout == 10
    assert config.client_authentication_method == "client_secret_post"


def test_config_endpoints() -> None:
    config = ClientConfig("https://mytenant.eu.auth0.com/", "client_id")
    assert config.issuer == "https://mytenant.eu.auth0.com/"
    assert config.token_endpoint == "https://mytenant.eu.auth0.com/oauth/token"
    assert config.userinfo_endpoint == "https://mytenant.eu.auth0.com/userinfo"
    assert config.authorization_endpoint == "https://mytenant.eu.auth0.com/authorize"
    assert config.jwks_uri == "https://mytenant.eu.auth0.com/.well-known/jwks.json"


def test_config_scope_as_list() -> None:
    config = ClientConfig("mytenant", "client_id", scope=["openid", "offline_access"])
    assert config.scope == "openid offline_access"


def test_config_is_immutable() -> None:
    config = ClientConfig("mytenant", "client_id")
    with pytest.raises(AttributeError):
        config.client_id = "foo"  # type: ignore[misc]


def test_invalid_redirect_uri() -> None:
    with pytest.raises(InvalidEndpointUri) as exc_info:
        ClientConfig("mytenant", "client_id", redirect_uri="https://my.app/callback#fragment")
    assert exc_info.value.name == "redirect_uri"

    # only checked outside of testing mode
    config = ClientConfig("mytenant", "client_id", redirect_uri="https://my.app/callback#fragment", testing=True)
    assert config.redirect_uri == "https://my.app/callback#fragment"


def test_http_redirect_uri_is_allowed() -> None:
    config = ClientConfig("mytenant", "client_id", redirect_uri="http://localhost:5000/callback")
    assert config.redirect_uri == "http://localhost:5000/callback"


def test_unsupported_id_token_alg() -> None:
    with pytest.raises(UnsupportedIdTokenAlg):
        ClientConfig("mytenant", "client_id", id_token_alg="foo")


def test_from_mapping() -> None:
    config = ClientConfig.from_mapping(
        {
            "domain": "mytenant.eu",
            "client_id": "client_id",
            "client_secret": "client_secret",
            "redirect_uri": "https://my.app/callback",
            "skip_userinfo": True,
        }
    )
    assert config == ClientConfig(
        "mytenant.eu",
        "client_id",
        "client_secret",
        redirect_uri="https://my.app/callback",
        skip_userinfo=True,
    )

    with pytest.raises(UnknownConfigKeys) as exc_info:
        ClientConfig.from_mapping({"domain": "mytenant", "client_id": "client_id", "foo": 1, "bar": 2})
    assert exc_info.value.keys == ["bar", "foo"]
