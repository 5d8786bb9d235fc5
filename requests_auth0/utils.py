"""Various helpers used by the client and its configuration."""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Iterable, Iterator

from furl import furl  # type: ignore[import-untyped]


class InvalidUri(ValueError):
    """Raised when a URI does not pass validation by `validate_endpoint_uri()`."""

    def __init__(self, url: str, *, https: bool, no_credentials: bool, no_fragment: bool) -> None:
        super().__init__("Invalid endpoint uri.")
        self.url = url
        self.https = https
        self.no_credentials = no_credentials
        self.no_fragment = no_fragment

    def errors(self) -> Iterator[str]:
        """Iterate over all error descriptions, as str."""
        if self.https:
            yield "must use https"
        if self.no_credentials:
            yield "must not contain basic credentials"
        if self.no_fragment:
            yield "must not contain a uri fragment"

    def __str__(self) -> str:
        all_errors = ", ".join(self.errors())
        return f"Invalid URI '{self.url}': {all_errors}"


def validate_endpoint_uri(uri: str, *, https: bool = True) -> str:
    """Check that a URI can be used to reach an Auth0 endpoint.

    The URI must use `https` (unless `https=False`), and must include neither
    basic credentials nor a fragment.

    Raises:
        InvalidUri: if the uri is not suitable

    Returns:
        the same uri

    """
    url = furl(uri)
    bad_scheme = https and url.scheme != "https"
    has_credentials = bool(url.username or url.password)
    has_fragment = bool(url.fragment)
    if bad_scheme or has_credentials or has_fragment:
        raise InvalidUri(uri, https=bad_scheme, no_credentials=has_credentials, no_fragment=has_fragment)
    return uri


def scope_to_str(scope: str | Iterable[str] | None) -> str | None:
    """Normalize a scope, given as a space separated str or an iterable of str, to a str."""
    if scope is None or isinstance(scope, str):
        return scope
    return " ".join(scope)


def scope_contains(scope: str | None, value: str) -> bool:
    """Return `True` if a space separated `scope` contains `value`."""
    if not scope:
        return False
    return value in scope.split()


def accepts_expires_in(f: Callable[..., Any]) -> Callable[..., Any]:
    """Decorate methods to handle both `expires_at` and `expires_in`.

    If supplied, `expires_in` (in seconds, as int or numeric str) is converted to a datetime that
    many seconds in the future, and passed as `expires_at` to the decorated method.

    """

    @wraps(f)
    def decorator(
        *args: Any,
        expires_in: int | str | None = None,
        expires_at: datetime | None = None,
        **kwargs: Any,
    ) -> Any:
        if expires_in is None and expires_at is None:
            return f(*args, **kwargs)
        if expires_in and isinstance(expires_in, str):
            with suppress(ValueError):
                expires_at = datetime.now(tz=timezone.utc).replace(microsecond=0) + timedelta(seconds=int(expires_in))
        elif expires_in and isinstance(expires_in, int):
            expires_at = datetime.now(tz=timezone.utc).replace(microsecond=0) + timedelta(seconds=expires_in)
        return f(*args, expires_at=expires_at, **kwargs)

    return decorator
