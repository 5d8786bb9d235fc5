"""`requests` Auth Handler for Bearer access tokens."""

from __future__ import annotations

import requests


class BearerAuth(requests.auth.AuthBase):
    """Add an `Authorization: Bearer <access_token>` header to requests, as defined in RFC6750.

    Args:
        access_token: the access token to send

    """

    AUTHORIZATION_HEADER = "Authorization"

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token

    def authorization_header(self) -> str:
        """Return the `Authorization` header value for this token."""
        return f"Bearer {self.access_token}"

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request.headers[self.AUTHORIZATION_HEADER] = self.authorization_header()
        return request
