"""Cookie-held session state for the customer login flow.

There is no server-side session table: the login attempt (PKCE verifier and
state) and the issued tokens live in HTTP-only browser cookies.
"""

from fastapi import Request, Response

from storefront_api.auth.models import LoginAttempt, TokenSet
from storefront_api.config import Settings

PKCE_VERIFIER_COOKIE = "pkce_verifier"
OAUTH_STATE_COOKIE = "oauth_state"
ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

ATTEMPT_COOKIES = (PKCE_VERIFIER_COOKIE, OAUTH_STATE_COOKIE)
TOKEN_COOKIES = (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE)


class SessionCookieStore:
    """Reads and writes the login attempt and token cookies."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _set(self, response: Response, key: str, value: str, max_age: int) -> None:
        response.set_cookie(
            key=key,
            value=value,
            max_age=max_age,
            path="/",
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite="lax",
        )

    def _delete(self, response: Response, key: str) -> None:
        response.delete_cookie(
            key=key,
            path="/",
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite="lax",
        )

    def store_attempt(self, response: Response, verifier: str, state: str) -> None:
        """Remember the PKCE verifier and state until the callback arrives."""
        max_age = self.settings.attempt_cookie_max_age
        self._set(response, PKCE_VERIFIER_COOKIE, verifier, max_age)
        self._set(response, OAUTH_STATE_COOKIE, state, max_age)

    def read_attempt(self, request: Request) -> LoginAttempt | None:
        """Return the stored login attempt, or None unless both cookies are present."""
        verifier = request.cookies.get(PKCE_VERIFIER_COOKIE)
        state = request.cookies.get(OAUTH_STATE_COOKIE)
        if not verifier or not state:
            return None
        return LoginAttempt(verifier=verifier, state=state)

    def clear_attempt(self, response: Response) -> None:
        for key in ATTEMPT_COOKIES:
            self._delete(response, key)

    def store_tokens(self, response: Response, tokens: TokenSet) -> None:
        """Write the session cookies for the fields present in the token response."""
        access_max_age = tokens.expires_in
        if access_max_age is None:
            access_max_age = self.settings.access_token_default_max_age
        self._set(response, ACCESS_TOKEN_COOKIE, tokens.access_token, access_max_age)

        if tokens.refresh_token:
            self._set(
                response,
                REFRESH_TOKEN_COOKIE,
                tokens.refresh_token,
                self.settings.refresh_token_max_age,
            )

    def read_access_token(self, request: Request) -> str | None:
        return request.cookies.get(ACCESS_TOKEN_COOKIE) or None

    def clear_tokens(self, response: Response) -> None:
        for key in TOKEN_COOKIES:
            self._delete(response, key)
