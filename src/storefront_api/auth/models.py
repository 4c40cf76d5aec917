"""Authentication data models."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class PkcePair:
    """PKCE code verifier and its S256 challenge."""

    verifier: str
    challenge: str
    method: str = "S256"


class OpenIdConfiguration(BaseModel):
    """Provider OpenID discovery document. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    issuer: str | None = Field(None, description="Issuer identifier")
    authorization_endpoint: str = Field(..., min_length=1, description="Authorization endpoint URL")
    token_endpoint: str = Field(..., min_length=1, description="Token endpoint URL")
    end_session_endpoint: str | None = Field(None, description="RP-initiated logout endpoint")
    jwks_uri: str | None = Field(None, description="JSON Web Key Set URL")


class TokenSet(BaseModel):
    """Tokens returned by a successful authorization code exchange."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = Field(None, description="Access token lifetime in seconds")
    token_type: str = "Bearer"
    id_token: str | None = None
    scope: str | None = None


class LoginAttempt(BaseModel):
    """PKCE verifier and state held in the attempt cookies between login and callback."""

    verifier: str
    state: str


class MeResponse(BaseModel):
    """Response of the current-customer endpoint."""

    authenticated: bool
    customer: dict[str, Any] | None = None


class AuthErrorResponse(BaseModel):
    """Authentication error response."""

    error: str
    error_description: str | None = None
    redirect_to_login: bool = True
