"""This module contains the `TokenExchangeClient` and the lower level `AuthenticationClient`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, ClassVar, MutableMapping, TypeVar

import requests
from attrs import define, field, setters
from furl import furl  # type: ignore[import-untyped]
from jwskate import JwkSet

from .auth import BearerAuth
from .client_authentication import client_auth_factory
from .exceptions import (
    AccessDenied,
    ApiError,
    EndpointError,
    InvalidClient,
    InvalidGrant,
    InvalidRequest,
    InvalidTokenResponse,
    JwksError,
    MismatchingState,
    MissingAccessToken,
    MissingRefreshToken,
    ServerError,
    TokenNotRefreshed,
    UnauthorizedClient,
    UnknownTokenEndpointError,
    UserinfoError,
)
from .session import Session, SessionStorage
from .tokens import IdToken, IdTokenVerifier, TokenResponse, UnsupportedTokenType
from .utils import scope_contains

if TYPE_CHECKING:
    from .code_source import CodeSource
    from .config import ClientConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@define(init=False)
class AuthenticationClient:
    """Send requests to the Token, UserInfo and JWKS endpoints of an Auth0 tenant.

    All endpoint uris are derived from the tenant domain in the configuration. Requests go through
    a `requests.Session`, which is the place to configure proxies, certificates, or to intercept
    calls in tests.

    Args:
        config: the client configuration
        session: a `requests.Session` to send requests with
        authorization_server_jwks: the tenant public keys. If not provided, they are fetched
            from the tenant `jwks_uri` the first time an asymmetrically signed ID Token is verified.

    """

    config: ClientConfig = field(on_setattr=setters.frozen)
    auth: requests.auth.AuthBase = field(on_setattr=setters.frozen)
    session: requests.Session = field(on_setattr=setters.frozen)
    authorization_server_jwks: JwkSet | None

    exception_classes: ClassVar[dict[str, type[EndpointError]]] = {
        "invalid_request": InvalidRequest,
        "invalid_client": InvalidClient,
        "invalid_grant": InvalidGrant,
        "unauthorized_client": UnauthorizedClient,
        "access_denied": AccessDenied,
        "server_error": ServerError,
    }

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: requests.Session | None = None,
        authorization_server_jwks: JwkSet | dict[str, Any] | None = None,
    ) -> None:
        if authorization_server_jwks is not None and not isinstance(authorization_server_jwks, JwkSet):
            authorization_server_jwks = JwkSet(authorization_server_jwks)
        self.__attrs_init__(
            config=config,
            auth=client_auth_factory(
                config.client_id, config.client_secret, method=config.client_authentication_method
            ),
            session=session or requests.Session(),
            authorization_server_jwks=authorization_server_jwks,
        )

    def _request(
        self,
        endpoint_uri: str,
        on_success: Callable[[requests.Response], T],
        on_failure: Callable[[requests.Response], T],
        method: str = "POST",
        accept: str = "application/json",
        **requests_kwargs: Any,
    ) -> T:
        """Send a request to one of the tenant endpoints.

        The `Accept` header and timeout are set, then `on_success` is applied to successful
        responses and `on_failure` to the others.

        """
        requests_kwargs.setdefault("headers", {})
        requests_kwargs["headers"]["Accept"] = accept
        requests_kwargs.setdefault("timeout", self.config.timeout)

        logger.debug("%s %s", method, endpoint_uri)
        response = self.session.request(method, endpoint_uri, **requests_kwargs)
        logger.debug("%s %s returned status %s", method, endpoint_uri, response.status_code)
        if response.ok:
            return on_success(response)
        return on_failure(response)

    def token_request(self, data: dict[str, Any], **requests_kwargs: Any) -> TokenResponse:
        """Send a request to the token endpoint, with client authentication.

        Args:
            data: parameters to send. Items with a `None` value are not sent.
            **requests_kwargs: additional parameters for `requests`

        Returns:
            the parsed [TokenResponse][requests_auth0.tokens.TokenResponse]

        """
        return self._request(
            self.config.token_endpoint,
            auth=self.auth,
            data=data,
            on_success=self.parse_token_response,
            on_failure=self.on_token_error,
            **requests_kwargs,
        )

    def parse_token_response(self, response: requests.Response) -> TokenResponse:
        """Parse a successful Token Endpoint response.

        Raises:
            InvalidTokenResponse: if the response is not a JSON object, or not a Bearer token response

        """
        try:
            body = response.json()
        except ValueError:
            msg = "the token endpoint returned a response that is not JSON"
            raise InvalidTokenResponse(msg, response) from None
        if not isinstance(body, dict):
            msg = "the token endpoint returned a response that is not a JSON object"
            raise InvalidTokenResponse(msg, response)
        try:
            return TokenResponse(**body)
        except UnsupportedTokenType as exc:
            raise InvalidTokenResponse(str(exc), response) from exc

    def on_token_error(self, response: requests.Response) -> TokenResponse:
        """Error handler for `token_request()`.

        Raises:
            EndpointError: a subclass matching the standard `error` returned by the AS
            InvalidTokenResponse: if the error response is not a standard OAuth 2.0 error

        """
        try:
            data = response.json()
            error = data["error"]
        except (ValueError, KeyError, TypeError):
            msg = f"the token endpoint returned status {response.status_code}"
            raise InvalidTokenResponse(msg, response) from None
        exception_class = self.exception_classes.get(error, UnknownTokenEndpointError)
        raise exception_class(
            response=response,
            error=error,
            description=data.get("error_description"),
            uri=data.get("error_uri"),
        )

    def authorization_code(self, code: str, redirect_uri: str | None = None, **token_kwargs: Any) -> TokenResponse:
        """Exchange an authorization code for tokens, with the `authorization_code` grant."""
        data = dict(
            grant_type="authorization_code",
            code=code,
            redirect_uri=redirect_uri or self.config.redirect_uri,
            **token_kwargs,
        )
        return self.token_request(data)

    def refresh_token(self, refresh_token: str, **token_kwargs: Any) -> TokenResponse:
        """Obtain new tokens with the `refresh_token` grant."""
        data = dict(grant_type="refresh_token", refresh_token=refresh_token, **token_kwargs)
        return self.token_request(data)

    def userinfo(self, access_token: str) -> dict[str, Any]:
        """Call the UserInfo endpoint with an access token, and return the identity claims.

        Raises:
            UserinfoError: if the endpoint returns an error

        """
        return self._request(
            self.config.userinfo_endpoint,
            method="GET",
            auth=BearerAuth(access_token),
            on_success=self.parse_userinfo_response,
            on_failure=self.on_userinfo_error,
        )

    def parse_userinfo_response(self, response: requests.Response) -> dict[str, Any]:
        """Return the claims from a UserInfo response."""
        try:
            claims = response.json()
        except ValueError:
            claims = None
        if not isinstance(claims, dict):
            msg = "the userinfo endpoint returned a response that is not a JSON object"
            raise ApiError(msg, response)
        return claims

    def on_userinfo_error(self, response: requests.Response) -> dict[str, Any]:
        raise UserinfoError(response)

    def fetch_jwks(self) -> JwkSet:
        """Retrieve the tenant public keys from its `jwks_uri`, and keep them for later use.

        Raises:
            JwksError: if the keys cannot be retrieved

        """

        def on_success(response: requests.Response) -> JwkSet:
            try:
                return JwkSet(response.json())
            except ValueError:
                raise JwksError(response) from None

        def on_failure(response: requests.Response) -> JwkSet:
            raise JwksError(response)

        self.authorization_server_jwks = self._request(
            self.config.jwks_uri, method="GET", on_success=on_success, on_failure=on_failure
        )
        return self.authorization_server_jwks

    def get_jwks(self) -> JwkSet:
        """Return the tenant public keys, fetching them on first use."""
        if self.authorization_server_jwks is None:
            return self.fetch_jwks()
        return self.authorization_server_jwks

    @property
    def id_token_verifier(self) -> IdTokenVerifier:
        """An `IdTokenVerifier` configured for this tenant and client."""
        return IdTokenVerifier(
            issuer=self.config.issuer,
            client_id=self.config.client_id,
            alg=self.config.id_token_alg,
            client_secret=self.config.client_secret,
            get_jwks=self.get_jwks,
            leeway=self.config.id_token_leeway,
        )

    def verify_id_token(self, id_token: str) -> IdToken:
        """Verify an ID Token returned by the tenant. See `IdTokenVerifier.verify()`."""
        return self.id_token_verifier.verify(id_token)

    def authorization_url(self, state: str | None = None, nonce: str | None = None, **params: Any) -> str:
        """Build the url to send the user to, to start an Authorization Code flow.

        `scope`, `audience` and `redirect_uri` come from the configuration, unless they are
        overridden in `params`.

        """
        args = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "scope": self.config.scope,
            "audience": self.config.audience,
            "state": state,
            "nonce": nonce,
        }
        args.update(params)
        return str(furl(self.config.authorization_endpoint).add(args={k: v for k, v in args.items() if v is not None}))


class TokenExchangeClient:
    """Obtain and hold the tokens and identity claims of a user of an Auth0 tenant.

    The client keeps a single [Session][requests_auth0.session.Session]. `exchange()` replaces it
    with the tokens obtained from an authorization code, `renew_tokens()` replaces it with
    refreshed tokens. On any error, the current session is left as it was.

    Args:
        config: the client configuration
        code_source: where `exchange()` reads the authorization code from, when it is not
            given one explicitly
        store: a mapping where the session members selected by the `persist_*` options of
            `config` are persisted, and restored from at init time
        store_prefix: a prefix for the keys written to `store`
        http_session: a `requests.Session` used for all HTTP requests
        authorization_server_jwks: the tenant public keys, if already known

    Example:
        ```python
        from requests_auth0 import CallbackUrlCodeSource, ClientConfig, TokenExchangeClient

        config = ClientConfig(
            "mytenant.eu",
            client_id="my_client_id",
            client_secret="my_client_secret",
            redirect_uri="https://my.app/callback",
        )
        client = TokenExchangeClient(config)
        if client.exchange(CallbackUrlCodeSource(callback_url)):
            print(client.get_user())
        ```

    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        code_source: CodeSource | None = None,
        store: MutableMapping[str, str] | None = None,
        store_prefix: str = "auth0__",
        http_session: requests.Session | None = None,
        authorization_server_jwks: JwkSet | dict[str, Any] | None = None,
    ) -> None:
        self.config = config
        self.code_source = code_source
        self.api = AuthenticationClient(
            config, session=http_session, authorization_server_jwks=authorization_server_jwks
        )
        self.storage: SessionStorage | None = None
        if store is not None:
            self.storage = SessionStorage(store, self.persisted_members(config), prefix=store_prefix)
        self._session = self.storage.load() if self.storage is not None else Session()

        if config.skip_userinfo and not scope_contains(config.scope, "openid"):
            logger.warning(
                "skip_userinfo is enabled but scope '%s' does not include 'openid': "
                "no ID Token will be issued, and no identity claims will be available",
                config.scope,
            )

    @staticmethod
    def persisted_members(config: ClientConfig) -> tuple[str, ...]:
        """Names of the `Session` members that `config` asks to persist."""
        members = (
            ("user", config.persist_user),
            ("access_token", config.persist_access_token),
            ("refresh_token", config.persist_refresh_token),
            ("id_token", config.persist_id_token),
        )
        return tuple(name for name, enabled in members if enabled)

    @property
    def session(self) -> Session:
        """The current session."""
        return self._session

    def exchange(self, code_source: CodeSource | None = None, *, expected_state: str | None = None) -> bool:
        """Exchange an authorization code for tokens and identity claims.

        If there is no authorization code available, this returns `False` without sending any
        request. Otherwise, the code is exchanged at the Token Endpoint, the ID Token (if any) is
        verified, then identity claims are obtained:

        - from the ID Token only, when `skip_userinfo` is set,
        - from the UserInfo endpoint when an access token was returned,
        - from the ID Token otherwise.

        Args:
            code_source: where to read the code from. Defaults to the client `code_source`.
            expected_state: if provided, the `state` from the code source must match this value.

        Returns:
            `True` once the session is replaced, `False` if there was no code to exchange.

        Raises:
            MismatchingState: if `expected_state` does not match
            ApiError: if the Token Endpoint or UserInfo Endpoint return an error
            TokenValidationError: if the ID Token does not verify

        """
        source = code_source or self.code_source
        code = source.get_code() if source is not None else None
        if not code:
            logger.debug("no authorization code available, nothing to exchange")
            return False

        if expected_state is not None:
            state = source.get_state()  # type: ignore[union-attr]
            if state != expected_state:
                raise MismatchingState(state, expected_state)

        token = self.api.authorization_code(code, redirect_uri=self.config.redirect_uri)
        if not token.access_token and not token.id_token:
            msg = "the token endpoint returned neither an access token nor an ID token"
            raise InvalidTokenResponse(msg)

        id_token = self.api.verify_id_token(token.id_token) if token.id_token else None

        if self.config.skip_userinfo or not token.access_token:
            user = dict(id_token.claims) if id_token is not None else None
        else:
            user = self.api.userinfo(token.access_token)

        self._replace_session(
            Session(
                access_token=token.access_token,
                id_token=id_token,
                refresh_token=token.refresh_token,
                user=user,
                expires_at=token.expires_at,
                scope=token.scope,
            )
        )
        return True

    def renew_tokens(self) -> Session:
        """Obtain a new access token and ID token with the current refresh token.

        The refresh token is kept, unless the tenant returns a new one. Identity claims are
        replaced by the claims of the new ID Token.

        Returns:
            the new session

        Raises:
            MissingAccessToken: if there is no current access token
            MissingRefreshToken: if there is no current refresh token
            TokenNotRefreshed: if the response lacks an access token or an ID token
            ApiError: if the Token Endpoint returns an error
            TokenValidationError: if the new ID Token does not verify

        """
        current = self._session
        if not current.access_token:
            raise MissingAccessToken
        if not current.refresh_token:
            raise MissingRefreshToken

        token = self.api.refresh_token(current.refresh_token)
        if not token.access_token or not token.id_token:
            raise TokenNotRefreshed

        id_token = self.api.verify_id_token(token.id_token)
        renewed = current.replace(
            access_token=token.access_token,
            id_token=id_token,
            refresh_token=token.refresh_token or current.refresh_token,
            user=dict(id_token.claims),
            expires_at=token.expires_at,
            scope=token.scope or current.scope,
        )
        self._replace_session(renewed)
        return renewed

    def logout(self) -> None:
        """Forget the current session, and remove it from the store."""
        self._session = Session()
        if self.storage is not None:
            self.storage.clear()
        logger.debug("session cleared")

    def _replace_session(self, session: Session) -> None:
        self._session = session
        if self.storage is not None:
            self.storage.save(session)
        logger.debug(
            "session replaced (access_token=%s, id_token=%s, refresh_token=%s, user=%s)",
            session.access_token is not None,
            session.id_token is not None,
            session.refresh_token is not None,
            session.user is not None,
        )

    def get_user(self) -> dict[str, Any] | None:
        """Return the identity claims of the current user, if any."""
        return self._session.user

    def get_id_token(self) -> str | None:
        """Return the current ID Token, in compact form, if any."""
        if self._session.id_token is None:
            return None
        return str(self._session.id_token)

    def get_access_token(self) -> str | None:
        """Return the current access token, if any."""
        return self._session.access_token

    def get_refresh_token(self) -> str | None:
        """Return the current refresh token, if any."""
        return self._session.refresh_token

    def authorization_url(self, state: str | None = None, nonce: str | None = None, **params: Any) -> str:
        """Return the url to redirect the user to. See `AuthenticationClient.authorization_url()`."""
        return self.api.authorization_url(state=state, nonce=nonce, **params)
