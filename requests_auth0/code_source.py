"""Sources of Authorization Codes.

A [TokenExchangeClient][requests_auth0.client.TokenExchangeClient] does not know where the
authorization code comes from. It reads it from a `CodeSource`, which typically extracts it from
the query parameters of the request made by the browser to the redirect_uri.

"""

from __future__ import annotations

from attrs import frozen
from furl import furl  # type: ignore[import-untyped]
from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class CodeSource(Protocol):
    """Provide the authorization code, and the `state` returned alongside it."""

    def get_code(self) -> str | None:
        """Return the authorization code, or `None` if there is none."""
        ...

    def get_state(self) -> str | None:
        """Return the `state`, or `None` if there is none."""
        ...


@frozen
class StaticCodeSource:
    """A `CodeSource` for a code that is already known."""

    code: str | None
    state: str | None = None

    def get_code(self) -> str | None:
        return self.code or None

    def get_state(self) -> str | None:
        return self.state


@frozen(init=False)
class CallbackUrlCodeSource:
    """A `CodeSource` that reads `code` and `state` from the query of a redirect_uri callback.

    Args:
        url: the full url that the browser was redirected to, including the query string.

    Example:
        ```python
        source = CallbackUrlCodeSource("https://my.app/callback?code=abcd&state=efgh")
        assert source.get_code() == "abcd"
        ```

    """

    url: str
    params: dict[str, str]

    def __init__(self, url: str | furl) -> None:
        parsed = furl(url)
        self.__attrs_init__(url=str(parsed), params=dict(parsed.args))

    def get_code(self) -> str | None:
        return self.params.get("code") or None

    def get_state(self) -> str | None:
        return self.params.get("state")
