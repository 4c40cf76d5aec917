"""Customer account authentication for the storefront API."""

from storefront_api.auth.customer_account import CustomerAccountClient
from storefront_api.auth.errors import (
    CustomerAuthError,
    DiscoveryError,
    GraphQLExecutionError,
    GraphQLTransportError,
    LoginAttemptError,
    MissingAttemptError,
    StateMismatchError,
    TokenExchangeError,
)
from storefront_api.auth.models import LoginAttempt, OpenIdConfiguration, PkcePair, TokenSet
from storefront_api.auth.oidc import (
    DiscoveryDocumentCache,
    OIDCProvider,
    TokenExchangeClient,
    build_authorization_url,
)
from storefront_api.auth.routes import router as account_router
from storefront_api.auth.security import generate_pkce_pair, generate_state_token
from storefront_api.auth.session import SessionCookieStore

__all__ = [
    # Models
    "LoginAttempt",
    "OpenIdConfiguration",
    "PkcePair",
    "TokenSet",
    # Errors
    "CustomerAuthError",
    "DiscoveryError",
    "GraphQLExecutionError",
    "GraphQLTransportError",
    "LoginAttemptError",
    "MissingAttemptError",
    "StateMismatchError",
    "TokenExchangeError",
    # Security
    "generate_pkce_pair",
    "generate_state_token",
    # Providers
    "DiscoveryDocumentCache",
    "OIDCProvider",
    "TokenExchangeClient",
    "build_authorization_url",
    "CustomerAccountClient",
    # Session
    "SessionCookieStore",
    # Routes
    "account_router",
]
