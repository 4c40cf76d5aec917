"""Customer account routes for the login/callback/logout flow."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from storefront_api.auth.customer_account import CURRENT_CUSTOMER_QUERY
from storefront_api.auth.errors import (
    AuthorizationDeniedError,
    CustomerAuthError,
    GraphQLTransportError,
    MissingAttemptError,
    MissingCodeError,
    StateMismatchError,
)
from storefront_api.auth.middleware import (
    AppSettings,
    CookieStore,
    CustomerApi,
    OptionalAccessToken,
    Provider,
)
from storefront_api.auth.models import AuthErrorResponse, MeResponse
from storefront_api.auth.security import generate_pkce_pair, generate_state_token, states_match

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["customer-account"])


def auth_error_response(exc: CustomerAuthError) -> JSONResponse:
    """Render a CustomerAuthError as a JSON error response."""
    body = AuthErrorResponse(error=exc.error, error_description=exc.description)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def handle_customer_auth_error(request: Request, exc: CustomerAuthError) -> JSONResponse:
    """Exception handler for errors raised outside the callback."""
    logger.warning(f"{request.url.path} failed: {exc.error}")
    return auth_error_response(exc)


@router.get("/login")
async def login(oidc_provider: Provider, cookie_store: CookieStore):
    """
    Start a customer login.
    Redirects to the Shopify customer login page.
    """
    pkce = generate_pkce_pair()
    state = generate_state_token()

    auth_url = await oidc_provider.build_authorization_url(
        state=state,
        code_challenge=pkce.challenge,
    )

    response = RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
    cookie_store.store_attempt(response, verifier=pkce.verifier, state=state)
    logger.info("Started customer login attempt")
    return response


@router.get("/callback", name="account_callback")
async def callback(
    request: Request,
    oidc_provider: Provider,
    cookie_store: CookieStore,
    settings: AppSettings,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
):
    """
    Login callback.
    The front-end forwards ``code`` and ``state`` here; we exchange the code
    for tokens and set the session cookies.
    """
    attempt = cookie_store.read_attempt(request)

    try:
        if error:
            raise AuthorizationDeniedError(
                f"Authentication failed: {error_description or error}",
                error=error,
            )
        if attempt is None:
            raise MissingAttemptError("Login attempt expired or not found. Please try again.")
        if not state or not states_match(attempt.state, state):
            raise StateMismatchError("Invalid login state. Please try again.")
        if not code:
            raise MissingCodeError("Missing authorization code. Please try again.")

        tokens = await oidc_provider.exchange_code_for_tokens(
            code=code,
            code_verifier=attempt.verifier,
        )
    except CustomerAuthError as e:
        logger.warning(f"Login callback rejected: {e.error}")
        response = auth_error_response(e)
        cookie_store.clear_attempt(response)
        return response

    response = RedirectResponse(url=settings.post_login_url, status_code=status.HTTP_302_FOUND)
    cookie_store.store_tokens(response, tokens)
    cookie_store.clear_attempt(response)

    logger.info("Customer logged in successfully")
    return response


@router.get("/logout")
async def logout(cookie_store: CookieStore, settings: AppSettings):
    """Log out the current customer by clearing the session cookies."""
    response = RedirectResponse(url=settings.app_url, status_code=status.HTTP_302_FOUND)
    cookie_store.clear_tokens(response)
    logger.info("Customer logged out")
    return response


@router.get("/me", response_model=MeResponse, response_model_exclude_none=True)
async def me(access_token: OptionalAccessToken, customer_api: CustomerApi):
    """Get the currently logged-in customer."""
    if not access_token:
        return MeResponse(authenticated=False)

    try:
        data = await customer_api.query(access_token, CURRENT_CUSTOMER_QUERY)
    except GraphQLTransportError as e:
        if e.is_unauthorized:
            logger.info("Customer access token rejected by the Customer API")
            return MeResponse(authenticated=False)
        raise

    return MeResponse(authenticated=True, customer=data.get("customer"))
