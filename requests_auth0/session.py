"""The session record holding the tokens and identity claims obtained by a client."""

from __future__ import annotations

import logging
import zlib
from datetime import datetime
from typing import Any, Callable, MutableMapping

from attrs import evolve, frozen
from binapy import BinaPy
from jwskate import InvalidJwt
from typing_extensions import Self

from .tokens import IdToken

logger = logging.getLogger(__name__)


@frozen
class Session:
    """The tokens and identity claims of an authenticated user.

    A `Session` is immutable: successful operations replace the client session with a new
    instance, so a `Session` obtained from a client never changes afterwards.

    """

    access_token: str | None = None
    id_token: IdToken | None = None
    refresh_token: str | None = None
    user: dict[str, Any] | None = None
    expires_at: datetime | None = None
    scope: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """`True` if this session holds identity claims or an access token."""
        return bool(self.user or self.access_token)

    def replace(self, **changes: Any) -> Self:
        """Return a copy of this session with the given members replaced."""
        return evolve(self, **changes)


class SessionSerializer:
    """Serialize individual session members for storage in a str-valued mapping.

    Values are dumped to JSON, compressed with deflate, then encoded with base64url. Custom
    `dumper` and `loader` functions may be provided instead.

    Args:
        dumper: a function to serialize a JSON-compatible value into a `str`.
        loader: a function to deserialize a value serialized by `dumper`.

    """

    def __init__(
        self,
        dumper: Callable[[Any], str] | None = None,
        loader: Callable[[str], Any] | None = None,
    ) -> None:
        self.dumper = dumper or self.default_dumper
        self.loader = loader or self.default_loader

    @staticmethod
    def default_dumper(value: Any) -> str:
        """Serialize a value as JSON, then compress with deflate, then encode as base64url."""
        return BinaPy.serialize_to("json", value).to("deflate").to("b64u").ascii()

    @staticmethod
    def default_loader(serialized: str) -> Any:
        """Deserialize a value serialized with `default_dumper`."""
        return BinaPy(serialized).decode_from("b64u").decode_from("deflate").parse_from("json")

    def dumps(self, value: Any) -> str:
        """Serialize a value."""
        return self.dumper(value)

    def loads(self, serialized: str) -> Any:
        """Deserialize a value."""
        return self.loader(serialized)


class SessionStorage:
    """Persist selected members of a [Session][requests_auth0.session.Session] in a mapping.

    The mapping is provided by the caller, and can be a plain `dict` or any web framework session
    object. Each persisted member is stored under `<prefix><member>`.

    Args:
        store: the mapping to write to and read from
        members: names of the `Session` members to persist
        prefix: prefix of the keys in `store`
        serializer: the serializer for stored values

    """

    def __init__(
        self,
        store: MutableMapping[str, str],
        members: tuple[str, ...],
        prefix: str = "auth0__",
        serializer: SessionSerializer | None = None,
    ) -> None:
        self.store = store
        self.members = members
        self.prefix = prefix
        self.serializer = serializer or SessionSerializer()

    def load(self) -> Session:
        """Restore a `Session` from the store.

        Members that are not stored are left empty. Stored values that cannot be deserialized are
        removed from the store, and the matching members are left empty as well.

        """
        values: dict[str, Any] = {}
        for member in self.members:
            key = self.prefix + member
            serialized = self.store.get(key)
            if serialized is None:
                continue
            try:
                value = self.serializer.loads(serialized)
                if member == "id_token":
                    value = IdToken(value)
            except (ValueError, TypeError, zlib.error, InvalidJwt):
                logger.warning("discarding unreadable session value stored under '%s'", key)
                self.store.pop(key, None)
                continue
            values[member] = value
        return Session(**values)

    def save(self, session: Session) -> None:
        """Write the persisted members of `session` to the store, removing empty ones."""
        for member in self.members:
            key = self.prefix + member
            value = getattr(session, member)
            if value is None:
                self.store.pop(key, None)
                continue
            if isinstance(value, IdToken):
                value = str(value)
            self.store[key] = self.serializer.dumps(value)

    def clear(self) -> None:
        """Remove all persisted members from the store."""
        for member in self.members:
            self.store.pop(self.prefix + member, None)
