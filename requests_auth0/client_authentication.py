"""Client Authentication Methods for the Token Endpoint.

A confidential client must authenticate whenever it sends a request to the Token Endpoint. Those
are `requests` Auth Handlers that add the client credentials to token requests.

"""

from __future__ import annotations

from urllib.parse import parse_qs

import requests
from attrs import frozen
from binapy import BinaPy


class InvalidRequestForClientAuthentication(RuntimeError):
    """Raised when a request is not suitable for OAuth 2.0 client authentication."""

    def __init__(self, request: requests.PreparedRequest) -> None:
        super().__init__("This request is not suitable for OAuth 2.0 client authentication.")
        self.request = request


class UnsupportedClientAuthenticationMethod(ValueError):
    """Raised when an unknown client authentication method name is requested."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported client authentication method: {method}")
        self.method = method


def _form_params(request: requests.PreparedRequest) -> dict[bytes, list[bytes]]:
    if isinstance(request.body, (str, bytes)) and request.body:
        body = request.body.encode() if isinstance(request.body, str) else request.body
        return parse_qs(body, strict_parsing=True, keep_blank_values=True)
    return {}


@frozen
class BaseClientAuthenticationMethod(requests.auth.AuthBase):
    """Base class for Client Authentication methods.

    It only checks that requests are form-encoded POST requests, and does not modify them.

    """

    client_id: str

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        """Check that the request is a form-encoded `POST`.

        Raises:
            InvalidRequestForClientAuthentication: if the request is not suitable

        """
        if request.method != "POST" or request.headers.get("Content-Type") not in (
            "application/x-www-form-urlencoded",
            None,
        ):
            raise InvalidRequestForClientAuthentication(request)
        return request


@frozen
class ClientSecretPost(BaseClientAuthenticationMethod):
    """Implement `client_secret_post`: `client_id` and `client_secret` are sent in the form body.

    This is the method used by default with Auth0 Regular Web Applications.

    """

    client_secret: str

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request = super().__call__(request)
        params = _form_params(request)
        params[b"client_id"] = [self.client_id.encode()]
        params[b"client_secret"] = [self.client_secret.encode()]
        request.prepare_body(params, files=None)
        return request


@frozen
class ClientSecretBasic(BaseClientAuthenticationMethod):
    """Implement `client_secret_basic`: credentials are sent in a `Basic` Authorization header."""

    client_secret: str

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request = super().__call__(request)
        b64encoded_credentials = BinaPy(f"{self.client_id}:{self.client_secret}").to("b64").ascii()
        request.headers["Authorization"] = f"Basic {b64encoded_credentials}"
        return request


@frozen
class PublicApp(BaseClientAuthenticationMethod):
    """Implement the `none` method for public clients, which only send their `client_id`."""

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request = super().__call__(request)
        params = _form_params(request)
        params[b"client_id"] = [self.client_id.encode()]
        request.prepare_body(params, files=None)
        return request


def client_auth_factory(
    client_id: str,
    client_secret: str | None = None,
    method: str = "client_secret_post",
) -> BaseClientAuthenticationMethod:
    """Initialize the Auth Handler for a client.

    Without a `client_secret`, this always returns a `PublicApp`.

    Args:
        client_id: the Client ID
        client_secret: the Client Secret, if any
        method: `client_secret_post` or `client_secret_basic`

    Raises:
        UnsupportedClientAuthenticationMethod: if `method` is not supported

    """
    if not client_secret:
        return PublicApp(client_id)
    if method == "client_secret_post":
        return ClientSecretPost(client_id, client_secret)
    if method == "client_secret_basic":
        return ClientSecretBasic(client_id, client_secret)
    raise UnsupportedClientAuthenticationMethod(method)
