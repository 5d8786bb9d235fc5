"""Configuration of a [TokenExchangeClient][requests_auth0.client.TokenExchangeClient]."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from attrs import Attribute, field, fields, frozen
from jwskate import SignatureAlgs
from typing_extensions import Self

from .utils import InvalidUri, scope_to_str, validate_endpoint_uri

DEFAULT_SCOPE = "openid profile email"


class InvalidConfig(ValueError):
    """Base class for invalid configuration errors."""


class InvalidDomain(InvalidConfig):
    """Raised when the Auth0 domain cannot be normalized."""

    def __init__(self, domain: str) -> None:
        super().__init__(
            f"Invalid domain '{domain}'. "
            "It must be a tenant name like 'mytenant.myregion', "
            "a full FQDN like 'mytenant.myregion.auth0.com', "
            "or an issuer like 'https://mytenant.myregion.auth0.com/'."
        )
        self.domain = domain


class InvalidEndpointUri(InvalidConfig):
    """Raised when an invalid uri is configured."""

    def __init__(self, name: str, uri: str, exc: InvalidUri) -> None:
        super().__init__(f"Invalid uri '{uri}' for '{name}': {exc}")
        self.name = name
        self.uri = uri


class UnsupportedIdTokenAlg(InvalidConfig):
    """Raised when the configured ID Token signature alg is not a known signature alg."""

    def __init__(self, alg: str) -> None:
        super().__init__(f"Unsupported ID Token signature alg '{alg}'")
        self.alg = alg


class UnknownConfigKeys(InvalidConfig):
    """Raised by `ClientConfig.from_mapping()` on unexpected keys."""

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys = sorted(keys)
        super().__init__(f"Unknown configuration keys: {', '.join(self.keys)}")


def normalize_domain(domain: str) -> str:
    """Given a tenant name, FQDN or issuer, return the tenant FQDN.

    Short tenant names like `mytenant` or `mytenant.eu` are completed with `.auth0.com`.

    Raises:
        InvalidDomain: if `domain` is empty, uses a scheme other than https, or includes a path.

    """
    if not domain:
        raise InvalidDomain(domain)
    fqdn = domain
    if "://" in fqdn:
        if not fqdn.startswith("https://"):
            raise InvalidDomain(domain)
        fqdn = fqdn[len("https://") :]
    fqdn = fqdn.rstrip("/")
    if not fqdn or "/" in fqdn:
        raise InvalidDomain(domain)
    if "." not in fqdn or fqdn.endswith((".eu", ".us", ".au", ".jp")):
        fqdn = f"{fqdn}.auth0.com"
    return fqdn


@frozen(init=False)
class ClientConfig:
    """Immutable settings for a client of an Auth0 tenant.

    Args:
        domain: the tenant name, FQDN or issuer identifier.
        client_id: the Client ID.
        client_secret: the Client Secret. Also used to verify HS256 signed ID Tokens.
        redirect_uri: the redirect_uri registered for this client, sent with the code exchange.
        scope: the scope requested at authorization time.
        audience: the API audience requested at authorization time, if any.
        skip_userinfo: if `True`, identity claims are taken from the ID Token only, and
            the UserInfo endpoint is never called.
        persist_user: persist the identity claims in the store, if any.
        persist_access_token: persist the access token in the store, if any.
        persist_refresh_token: persist the refresh token in the store, if any.
        persist_id_token: persist the ID token in the store, if any.
        id_token_alg: the expected ID Token signature alg.
        id_token_leeway: leeway, in seconds, applied to the ID Token expiration date.
        timeout: timeout, in seconds, for each HTTP request.
        client_authentication_method: `client_secret_post` (default) or `client_secret_basic`.
        testing: if `True`, skip the validation of `redirect_uri`.

    """

    domain: str = field()
    client_id: str
    client_secret: str | None
    redirect_uri: str | None = field()
    scope: str | None
    audience: str | None
    skip_userinfo: bool
    persist_user: bool
    persist_access_token: bool
    persist_refresh_token: bool
    persist_id_token: bool
    id_token_alg: str = field()
    id_token_leeway: int
    timeout: int
    client_authentication_method: str
    testing: bool

    def __init__(  # noqa: PLR0913
        self,
        domain: str,
        client_id: str,
        client_secret: str | None = None,
        *,
        redirect_uri: str | None = None,
        scope: str | Iterable[str] | None = DEFAULT_SCOPE,
        audience: str | None = None,
        skip_userinfo: bool = False,
        persist_user: bool = True,
        persist_access_token: bool = False,
        persist_refresh_token: bool = False,
        persist_id_token: bool = False,
        id_token_alg: str = SignatureAlgs.RS256,
        id_token_leeway: int = 60,
        timeout: int = 10,
        client_authentication_method: str = "client_secret_post",
        testing: bool = False,
    ) -> None:
        self.__attrs_init__(
            domain=normalize_domain(domain),
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            scope=scope_to_str(scope),
            audience=audience,
            skip_userinfo=skip_userinfo,
            persist_user=persist_user,
            persist_access_token=persist_access_token,
            persist_refresh_token=persist_refresh_token,
            persist_id_token=persist_id_token,
            id_token_alg=id_token_alg,
            id_token_leeway=id_token_leeway,
            timeout=timeout,
            client_authentication_method=client_authentication_method,
            testing=testing,
        )

    @redirect_uri.validator
    def _validate_redirect_uri(self, attribute: Attribute[str | None], uri: str | None) -> None:
        if self.testing or uri is None:
            return
        try:
            validate_endpoint_uri(uri, https=False)
        except InvalidUri as exc:
            raise InvalidEndpointUri(attribute.name, uri, exc) from exc

    @id_token_alg.validator
    def _validate_id_token_alg(self, attribute: Attribute[str], alg: str) -> None:
        if alg not in SignatureAlgs.ALL_SYMMETRIC and alg not in SignatureAlgs.ALL_ASYMMETRIC:
            raise UnsupportedIdTokenAlg(alg)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> Self:
        """Initialize a `ClientConfig` from a dict of settings, with the same keys as `__init__()`.

        Raises:
            UnknownConfigKeys: if `config` contains keys that are not configuration parameters.

        """
        known = {attribute.name for attribute in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise UnknownConfigKeys(unknown)
        return cls(**config)

    @property
    def issuer(self) -> str:
        """The issuer identifier, as included in ID Tokens `iss` claim."""
        return f"https://{self.domain}/"

    @property
    def token_endpoint(self) -> str:
        """The Token Endpoint uri."""
        return f"https://{self.domain}/oauth/token"

    @property
    def userinfo_endpoint(self) -> str:
        """The UserInfo Endpoint uri."""
        return f"https://{self.domain}/userinfo"

    @property
    def authorization_endpoint(self) -> str:
        """The Authorization Endpoint uri."""
        return f"https://{self.domain}/authorize"

    @property
    def jwks_uri(self) -> str:
        """The uri where the tenant public keys are published."""
        return f"https://{self.domain}/.well-known/jwks.json"
