from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import parse_qs

import pytest
from furl import Query  # type: ignore[import-untyped]
from jwskate import Jwk, Jwt, SymmetricJwk
from requests_mock import Mocker
from requests_mock.request import _RequestObjectProxy

from requests_auth0 import ClientConfig, TokenExchangeClient

RequestValidatorType = Callable[..., None]
IdTokenFactory = Callable[..., str]

if TYPE_CHECKING:
    from pytest import FixtureRequest as __FixtureRequest

    class FixtureRequest(__FixtureRequest):
        param: str

    class RequestsMocker(Mocker):
        def reset_mock(self) -> None: ...

else:
    from pytest import FixtureRequest

    RequestsMocker = Mocker


@pytest.fixture(scope="session")
def domain() -> str:
    return "test.eu.auth0.com"


@pytest.fixture(scope="session")
def issuer(domain: str) -> str:
    return f"https://{domain}/"


@pytest.fixture(scope="session")
def token_endpoint(domain: str) -> str:
    return f"https://{domain}/oauth/token"


@pytest.fixture(scope="session")
def userinfo_endpoint(domain: str) -> str:
    return f"https://{domain}/userinfo"


@pytest.fixture(scope="session")
def jwks_uri(domain: str) -> str:
    return f"https://{domain}/.well-known/jwks.json"


@pytest.fixture(scope="session")
def client_id() -> str:
    return "__test_client_id__"


@pytest.fixture(scope="session")
def client_secret() -> str:
    return "__test_client_secret_which_is_long_enough_for_hs256__"


@pytest.fixture(scope="session")
def redirect_uri() -> str:
    return "https://my.app.local/callback"


@pytest.fixture(scope="session", params=["openid offline_access"])
def scope(request: FixtureRequest) -> str:
    return request.param


@pytest.fixture(scope="session")
def authorization_code() -> str:
    return "authorization_code"


@pytest.fixture
def config_factory(
    domain: str, client_id: str, client_secret: str, redirect_uri: str, scope: str
) -> Callable[..., ClientConfig]:
    def factory(**kwargs: Any) -> ClientConfig:
        kwargs.setdefault("redirect_uri", redirect_uri)
        kwargs.setdefault("scope", scope)
        kwargs.setdefault("id_token_alg", "HS256")
        return ClientConfig(domain, client_id, client_secret, **kwargs)

    return factory


@pytest.fixture
def config(config_factory: Callable[..., ClientConfig]) -> ClientConfig:
    return config_factory()


@pytest.fixture
def client(config: ClientConfig) -> TokenExchangeClient:
    return TokenExchangeClient(config)


@pytest.fixture(scope="session")
def signing_jwk(client_secret: str) -> Jwk:
    return SymmetricJwk.from_bytes(client_secret.encode())


@pytest.fixture(scope="session")
def server_private_jwk() -> Jwk:
    return Jwk.generate(alg="RS256").with_kid_thumbprint()


@pytest.fixture(scope="session")
def server_public_jwks(server_private_jwk: Jwk) -> dict[str, Any]:
    return {"keys": [dict(server_private_jwk.public_jwk().with_usage_parameters())]}


@pytest.fixture(scope="session")
def id_token_factory(issuer: str, client_id: str, signing_jwk: Jwk) -> IdTokenFactory:
    def factory(key: Jwk = signing_jwk, alg: str = "HS256", **claims: Any) -> str:
        payload = {
            "iss": issuer,
            "aud": client_id,
            "iat": Jwt.timestamp(),
            "exp": Jwt.timestamp(3600),
        }
        payload.update(claims)
        return str(Jwt.sign({k: v for k, v in payload.items() if v is not None}, key, alg=alg))

    return factory


@pytest.fixture(scope="session")
def client_secret_post_auth_validator() -> RequestValidatorType:
    def validator(req: _RequestObjectProxy, *, client_id: str, client_secret: str) -> None:
        params = parse_qs(req.text)
        assert params.get("client_id") == [client_id]
        assert params.get("client_secret") == [client_secret]
        assert "Authorization" not in req.headers

    return validator


@pytest.fixture(scope="session")
def authorization_code_grant_validator() -> RequestValidatorType:
    def validator(req: _RequestObjectProxy, *, code: str, **kwargs: Any) -> None:
        params = Query(req.text).params
        assert params.get("grant_type") == "authorization_code"
        assert params.get("code") == code
        for key, val in kwargs.items():
            assert params.get(key) == val

    return validator


@pytest.fixture(scope="session")
def refresh_token_grant_validator() -> RequestValidatorType:
    def validator(req: _RequestObjectProxy, *, refresh_token: str, **kwargs: Any) -> None:
        params = Query(req.text).params
        assert params.get("grant_type") == "refresh_token"
        assert params.get("refresh_token") == refresh_token
        for key, val in kwargs.items():
            assert params.get(key) == val

    return validator


@pytest.fixture(scope="session")
def bearer_auth_validator() -> RequestValidatorType:
    def validator(req: _RequestObjectProxy, *, access_token: str) -> None:
        assert req.headers.get("Authorization") == f"Bearer {access_token}"

    return validator
