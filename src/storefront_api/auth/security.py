"""PKCE and state generation for the customer login flow.

All randomness comes from :mod:`secrets`.
"""

from __future__ import annotations

import base64
import hashlib
import secrets

from storefront_api.auth.models import PkcePair

PKCE_VERIFIER_BYTES = 32
STATE_TOKEN_BYTES = 16


def _base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def pkce_challenge(verifier: str) -> str:
    """Derive the S256 code challenge: BASE64URL(SHA256(verifier))."""
    return _base64url(hashlib.sha256(verifier.encode("ascii")).digest())


def generate_pkce_pair() -> PkcePair:
    """Generate a fresh PKCE verifier/challenge pair for one login attempt."""
    verifier = _base64url(secrets.token_bytes(PKCE_VERIFIER_BYTES))
    return PkcePair(verifier=verifier, challenge=pkce_challenge(verifier))


def generate_state_token() -> str:
    """Generate an unguessable state value for CSRF protection."""
    return _base64url(secrets.token_bytes(STATE_TOKEN_BYTES))


def states_match(expected: str, received: str) -> bool:
    """Constant-time comparison of the stored and returned state."""
    return secrets.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
