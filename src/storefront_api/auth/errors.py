"""Exception hierarchy for customer account authentication.

Each exception carries a stable ``error`` code, a human readable
``description`` and the HTTP status the API answers with. Messages never
include tokens, verifiers, state values or authorization codes.
"""

from __future__ import annotations


class CustomerAuthError(Exception):
    """Base exception for all customer authentication errors."""

    status_code: int = 500
    default_error: str = "server_error"

    def __init__(self, description: str, error: str | None = None):
        super().__init__(description)
        self.error = error or self.default_error
        self.description = description


class DiscoveryError(CustomerAuthError):
    """Raised when the OpenID discovery document cannot be fetched or parsed."""

    status_code = 503
    default_error = "discovery_failed"


class LoginAttemptError(CustomerAuthError):
    """Raised when a login callback cannot be matched to a login attempt.

    The user has to start the login again.
    """

    status_code = 400
    default_error = "invalid_login_state"


class MissingAttemptError(LoginAttemptError):
    """No (or expired) attempt cookies accompanied the callback."""

    default_error = "missing_login_attempt"


class StateMismatchError(LoginAttemptError):
    """The callback state does not match the stored state."""

    default_error = "state_mismatch"


class MissingCodeError(LoginAttemptError):
    """The callback carried no authorization code."""

    default_error = "missing_code"


class AuthorizationDeniedError(LoginAttemptError):
    """The provider redirected back with an ``error`` parameter."""

    default_error = "access_denied"


class TokenExchangeError(CustomerAuthError):
    """Raised when the provider rejects the authorization code exchange."""

    status_code = 400
    default_error = "token_exchange_failed"


class GraphQLError(CustomerAuthError):
    """Base exception for Customer Account API failures."""

    status_code = 502
    default_error = "customer_api_error"


class GraphQLTransportError(GraphQLError):
    """Raised on HTTP-level failure talking to the Customer Account API."""

    default_error = "customer_api_unavailable"

    def __init__(
        self,
        description: str,
        error: str | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(description, error)
        self.upstream_status = upstream_status

    @property
    def is_unauthorized(self) -> bool:
        return self.upstream_status == 401


class GraphQLExecutionError(GraphQLError):
    """Raised when the GraphQL response carries a non-empty ``errors`` list."""

    default_error = "customer_api_query_failed"
