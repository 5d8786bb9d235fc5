"""This module contains all exception classes from `requests_auth0`.

There are three families of errors:

- [ApiError][requests_auth0.exceptions.ApiError] when the Authorization Server returns an error,
  or a response that cannot be used,
- [CoreError][requests_auth0.exceptions.CoreError] when an operation is attempted while its
  preconditions are not met,
- [TokenValidationError][requests_auth0.exceptions.TokenValidationError] when an ID Token does not
  pass validation.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    import requests

    from .tokens import IdToken


class ApiError(Exception):
    """Base class for errors raised when a remote endpoint returns an error or an unusable response.

    Args:
        message: a description of the error
        response: the HTTP response that triggered the error, if any

    """

    def __init__(self, message: str, response: requests.Response | None = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int | None:
        """The HTTP status returned by the remote endpoint."""
        if self.response is None:
            return None
        return self.response.status_code

    @property
    def body(self) -> str | None:
        """The raw body returned by the remote endpoint."""
        if self.response is None:
            return None
        return self.response.text


class EndpointError(ApiError):
    """Raised when an endpoint returns a standard OAuth 2.0 error response.

    Args:
        response: the raw response containing the error.
        error: the `error` identifier as returned by the AS.
        description: the `error_description` as returned by the AS.
        uri: the `error_uri` as returned by the AS.

    """

    def __init__(
        self,
        response: requests.Response,
        error: str,
        description: str | None = None,
        uri: str | None = None,
    ) -> None:
        message = f"{error}: {description}" if description else error
        super().__init__(message, response)
        self.error = error
        self.description = description
        self.uri = uri


class TokenEndpointError(EndpointError):
    """Base class for errors that are specific to the token endpoint."""


class InvalidRequest(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_request`."""


class InvalidClient(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_client`."""


class InvalidGrant(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_grant`."""


class UnauthorizedClient(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = unauthorized_client`."""


class AccessDenied(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = access_denied`."""


class ServerError(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = server_error`."""


class UnknownTokenEndpointError(TokenEndpointError):
    """Raised when an otherwise unknown error is returned by the token endpoint."""


class InvalidTokenResponse(ApiError):
    """Raised when the Token Endpoint returns a response that is not usable."""


class UserinfoError(ApiError):
    """Raised when the UserInfo Endpoint returns an error."""

    def __init__(self, response: requests.Response) -> None:
        super().__init__(f"userinfo request failed with status {response.status_code}", response)


class JwksError(ApiError):
    """Raised when the JWKS cannot be retrieved from the Authorization Server."""

    def __init__(self, response: requests.Response) -> None:
        super().__init__(f"unable to fetch the authorization server JWKS (status {response.status_code})", response)


class TokenNotRefreshed(ApiError):
    """Raised when a refresh token response lacks an access token or an ID token."""

    def __init__(self, response: requests.Response | None = None) -> None:
        super().__init__("token did not refresh correctly: access or ID token not provided", response)


class CoreError(Exception):
    """Base class for errors raised when an operation is attempted without its prerequisites."""


class MissingAccessToken(CoreError):
    """Raised when renewing tokens while no access token is stored."""

    def __init__(self) -> None:
        super().__init__("cannot renew tokens: no valid access token")


class MissingRefreshToken(CoreError):
    """Raised when renewing tokens while no refresh token is stored."""

    def __init__(self) -> None:
        super().__init__("cannot renew tokens: no refresh token available")


class MismatchingState(CoreError):
    """Raised when the `state` returned with the authorization code is not the expected one."""

    def __init__(self, received: str | None, expected: str) -> None:
        super().__init__(f"invalid state (received '{received}', expected '{expected}')")
        self.received = received
        self.expected = expected


class TokenValidationError(ValueError):
    """Base class for errors raised when an ID Token does not pass validation.

    Args:
        message: a description of the failed check
        id_token: the ID Token, if it could be parsed

    """

    def __init__(self, message: str, id_token: IdToken | None = None) -> None:
        super().__init__(f"Invalid ID Token: {message}")
        self.id_token = id_token


class InvalidIdToken(TokenValidationError):
    """Raised when an ID Token is malformed, or cannot be verified at all."""


class InvalidIdTokenSignature(TokenValidationError):
    """Raised when the ID Token signature does not verify."""

    def __init__(self, id_token: IdToken) -> None:
        super().__init__("signature verification failed", id_token)


class MismatchingIdTokenAlg(TokenValidationError):
    """Raised when the ID Token is signed with an unexpected alg."""

    def __init__(self, received: str | None, expected: str, id_token: IdToken) -> None:
        super().__init__(f"token is signed with alg '{received}', client expects '{expected}'", id_token)
        self.received = received
        self.expected = expected


class MismatchingIdTokenIssuer(TokenValidationError):
    """Raised when the ID Token `iss` claim is not the configured issuer."""

    def __init__(self, received: str | None, expected: str, id_token: IdToken) -> None:
        super().__init__(f"`iss` from token '{received}' does not match expected value '{expected}'", id_token)
        self.received = received
        self.expected = expected


class MismatchingIdTokenAudience(TokenValidationError):
    """Raised when the ID Token audience does not include the Client ID."""

    def __init__(self, received: Sequence[str], expected: str, id_token: IdToken) -> None:
        super().__init__(f"token audience (`aud`) '{received}' does not match client_id '{expected}'", id_token)
        self.received = received
        self.expected = expected


class MismatchingIdTokenAzp(TokenValidationError):
    """Raised when the ID Token Authorized Party (`azp`) is not the Client ID."""

    def __init__(self, received: Any, expected: str, id_token: IdToken) -> None:
        super().__init__(f"token authorized party (`azp`) '{received}' does not match client_id '{expected}'", id_token)
        self.received = received
        self.expected = expected


class ExpiredIdToken(TokenValidationError):
    """Raised when the ID Token is expired."""

    def __init__(self, id_token: IdToken) -> None:
        super().__init__("token is expired", id_token)
        self.expires_at = id_token.expires_at
