"""Main module for `requests_auth0`.

You can import any class from any submodule directly from this main module.
"""

from .auth import BearerAuth
from .client import AuthenticationClient, TokenExchangeClient
from .client_authentication import (
    BaseClientAuthenticationMethod,
    ClientSecretBasic,
    ClientSecretPost,
    PublicApp,
    client_auth_factory,
)
from .code_source import CallbackUrlCodeSource, CodeSource, StaticCodeSource
from .config import (
    ClientConfig,
    InvalidConfig,
    InvalidDomain,
    InvalidEndpointUri,
    UnknownConfigKeys,
    UnsupportedIdTokenAlg,
    normalize_domain,
)
from .exceptions import (
    AccessDenied,
    ApiError,
    CoreError,
    EndpointError,
    ExpiredIdToken,
    InvalidClient,
    InvalidGrant,
    InvalidIdToken,
    InvalidIdTokenSignature,
    InvalidRequest,
    InvalidTokenResponse,
    JwksError,
    MismatchingIdTokenAlg,
    MismatchingIdTokenAudience,
    MismatchingIdTokenAzp,
    MismatchingIdTokenIssuer,
    MismatchingState,
    MissingAccessToken,
    MissingRefreshToken,
    ServerError,
    TokenEndpointError,
    TokenNotRefreshed,
    TokenValidationError,
    UnauthorizedClient,
    UnknownTokenEndpointError,
    UserinfoError,
)
from .session import Session, SessionSerializer, SessionStorage
from .tokens import IdToken, IdTokenVerifier, TokenResponse, UnsupportedTokenType

__all__ = [
    "AccessDenied",
    "ApiError",
    "AuthenticationClient",
    "BaseClientAuthenticationMethod",
    "BearerAuth",
    "CallbackUrlCodeSource",
    "ClientConfig",
    "ClientSecretBasic",
    "ClientSecretPost",
    "CodeSource",
    "CoreError",
    "EndpointError",
    "ExpiredIdToken",
    "IdToken",
    "IdTokenVerifier",
    "InvalidClient",
    "InvalidConfig",
    "InvalidDomain",
    "InvalidEndpointUri",
    "InvalidGrant",
    "InvalidIdToken",
    "InvalidIdTokenSignature",
    "InvalidRequest",
    "InvalidTokenResponse",
    "JwksError",
    "MismatchingIdTokenAlg",
    "MismatchingIdTokenAudience",
    "MismatchingIdTokenAzp",
    "MismatchingIdTokenIssuer",
    "MismatchingState",
    "MissingAccessToken",
    "MissingRefreshToken",
    "PublicApp",
    "ServerError",
    "Session",
    "SessionSerializer",
    "SessionStorage",
    "StaticCodeSource",
    "TokenEndpointError",
    "TokenExchangeClient",
    "TokenNotRefreshed",
    "TokenResponse",
    "TokenValidationError",
    "UnauthorizedClient",
    "UnknownConfigKeys",
    "UnknownTokenEndpointError",
    "UnsupportedIdTokenAlg",
    "UnsupportedTokenType",
    "UserinfoError",
    "client_auth_factory",
    "normalize_domain",
]
