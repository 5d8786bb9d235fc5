"""This module contains classes that represent Token Endpoint responses and ID Tokens."""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Any, Callable, ClassVar

import jwskate
from attrs import Factory, asdict, frozen

from .exceptions import (
    ExpiredIdToken,
    InvalidIdToken,
    InvalidIdTokenSignature,
    MismatchingIdTokenAlg,
    MismatchingIdTokenAudience,
    MismatchingIdTokenAzp,
    MismatchingIdTokenIssuer,
)
from .utils import accepts_expires_in


class UnsupportedTokenType(ValueError):
    """Raised when a Token Endpoint response contains a `token_type` other than `Bearer`."""

    def __init__(self, token_type: str) -> None:
        super().__init__(f"Unsupported token_type: {token_type}")
        self.token_type = token_type


class IdToken(jwskate.SignedJwt):
    """Represent an ID Token.

    An ID Token is a Signed JWT. Its claims must not be trusted before it is verified with an
    [IdTokenVerifier][requests_auth0.tokens.IdTokenVerifier].

    """

    @property
    def authorized_party(self) -> str | None:
        """The Authorized Party (azp)."""
        azp = self.claims.get("azp")
        if azp is None or isinstance(azp, str):
            return azp
        msg = "`azp` attribute must be a string."
        raise AttributeError(msg)


@frozen(init=False)
class TokenResponse:
    """A successful response from the Token Endpoint.

    Any subset of `access_token`, `id_token` and `refresh_token` may be present. The `id_token` is
    kept as returned by the AS, and is only parsed when it gets verified.

    Args:
        access_token: an `access_token`, as returned by the AS, if any.
        expires_at: an expiration date. This also accepts an `expires_in` hint as returned by the AS.
        scope: a `scope`, as returned by the AS, if any.
        refresh_token: a `refresh_token`, as returned by the AS, if any.
        token_type: a `token_type`, as returned by the AS, if any.
        id_token: an `id_token`, as returned by the AS, if any.
        **kwargs: additional parameters as returned by the AS, if any.

    """

    TOKEN_TYPE: ClassVar[str] = "Bearer"

    access_token: str | None = None
    expires_at: datetime | None = None
    scope: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    id_token: str | None = None
    kwargs: dict[str, Any] = Factory(dict)

    @accepts_expires_in
    def __init__(
        self,
        access_token: str | None = None,
        *,
        expires_at: datetime | None = None,
        scope: str | None = None,
        refresh_token: str | None = None,
        token_type: str | None = None,
        id_token: str | None = None,
        **kwargs: Any,
    ) -> None:
        if token_type is not None and token_type.title() != self.TOKEN_TYPE:
            raise UnsupportedTokenType(token_type)
        self.__attrs_init__(
            access_token=access_token or None,
            expires_at=expires_at,
            scope=scope,
            refresh_token=refresh_token or None,
            token_type=token_type,
            id_token=id_token or None,
            kwargs=kwargs,
        )

    @property
    def expires_in(self) -> int | None:
        """Number of seconds until expiration."""
        if self.expires_at:
            return ceil((self.expires_at - datetime.now(tz=timezone.utc)).total_seconds())
        return None

    def as_dict(self) -> dict[str, Any]:
        """Return the non-empty members of this response, as they would be returned by the AS."""
        d = asdict(self)
        d.pop("expires_at")
        d["expires_in"] = self.expires_in
        d.update(**d.pop("kwargs", {}))
        return {key: val for key, val in d.items() if val is not None}


@frozen
class IdTokenVerifier:
    """Verify ID Tokens returned by an Auth0 tenant.

    This checks the signature with the expected alg, then the `iss`, `aud`, `azp` and `exp` claims.
    Symmetric algs use the Client Secret as verification key. Asymmetric algs use the key from the
    tenant JWKS whose `kid` matches the token header; that JWKS is obtained with `get_jwks`, which
    is only invoked when an asymmetrically signed token is verified.

    Args:
        issuer: the expected `iss` claim
        client_id: the Client ID, which must be in the `aud` claim
        alg: the expected signature alg
        client_secret: the Client Secret, required for symmetric algs
        get_jwks: a callable that returns the tenant public keys, required for asymmetric algs
        leeway: a leeway, in seconds, applied to the expiration date

    """

    issuer: str
    client_id: str
    alg: str
    client_secret: str | None = None
    get_jwks: Callable[[], jwskate.JwkSet] | None = None
    leeway: int = 0

    def verify(self, value: str | IdToken) -> IdToken:
        """Verify an ID Token and return it, parsed.

        Raises:
            InvalidIdToken: if the token is not a signed JWT, or no verification key is available
            MismatchingIdTokenAlg: if the token is not signed with the expected alg
            InvalidIdTokenSignature: if the signature does not verify
            MismatchingIdTokenIssuer: if the `iss` claim is not the expected issuer
            MismatchingIdTokenAudience: if the `aud` claim does not contain the Client ID
            MismatchingIdTokenAzp: if the `azp` claim is present and is not the Client ID
            ExpiredIdToken: if the token is expired

        """
        if isinstance(value, IdToken):
            id_token = value
        else:
            try:
                id_token = IdToken(value)
            except jwskate.InvalidJwt:
                msg = "token is not a signed JWT."
                raise InvalidIdToken(msg) from None

        token_alg = id_token.get_header("alg")
        if token_alg != self.alg:
            raise MismatchingIdTokenAlg(token_alg, self.alg, id_token)

        verification_jwk = self.verification_key(id_token)
        if not id_token.verify_signature(verification_jwk, alg=self.alg):
            raise InvalidIdTokenSignature(id_token)

        try:
            issuer = id_token.issuer
            audiences = id_token.audiences or []
            azp = id_token.authorized_party
            # a positive leeway in jwskate marks tokens as expired earlier
            expired = id_token.is_expired(leeway=-self.leeway)
        except AttributeError as exc:
            msg = f"token contains a malformed claim: {exc}"
            raise InvalidIdToken(msg, id_token) from exc

        if issuer != self.issuer:
            raise MismatchingIdTokenIssuer(issuer, self.issuer, id_token)

        if self.client_id not in audiences:
            raise MismatchingIdTokenAudience(audiences, self.client_id, id_token)

        if azp is not None and azp != self.client_id:
            raise MismatchingIdTokenAzp(azp, self.client_id, id_token)

        if expired:
            raise ExpiredIdToken(id_token)

        return id_token

    def verification_key(self, id_token: IdToken) -> jwskate.Jwk:
        """Return the key to use to verify the signature of `id_token`."""
        if self.alg in jwskate.SignatureAlgs.ALL_SYMMETRIC:
            if not self.client_secret:
                msg = "token is symmetrically signed but this client does not have a Client Secret."
                raise InvalidIdToken(msg, id_token)
            return jwskate.SymmetricJwk.from_bytes(self.client_secret.encode())

        if self.get_jwks is None:
            msg = "token is asymmetrically signed but the Authorization Server JWKS is not available."
            raise InvalidIdToken(msg, id_token)
        kid = id_token.get_header("kid")
        if kid is None:
            msg = "token does not contain a Key ID (kid) to select the verification key."
            raise InvalidIdToken(msg, id_token)
        try:
            return self.get_jwks().get_jwk_by_kid(kid)
        except KeyError:
            msg = f"there is no key with kid='{kid}' in the Authorization Server JWKS."
            raise InvalidIdToken(msg, id_token) from None
