"""Authentication dependencies for FastAPI.

Components are built once in ``create_app`` and kept on ``app.state``; these
dependencies hand them to the route handlers.
"""

from typing import Annotated

from fastapi import Depends, Request

from storefront_api.auth.customer_account import CustomerAccountClient
from storefront_api.auth.oidc import OIDCProvider
from storefront_api.auth.session import SessionCookieStore
from storefront_api.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_oidc_provider(request: Request) -> OIDCProvider:
    return request.app.state.oidc_provider


def get_cookie_store(request: Request) -> SessionCookieStore:
    return request.app.state.cookie_store


def get_customer_api(request: Request) -> CustomerAccountClient:
    return request.app.state.customer_api


async def get_access_token(
    request: Request,
    cookie_store: Annotated[SessionCookieStore, Depends(get_cookie_store)],
) -> str | None:
    """Access token from the session cookie, or None when not logged in."""
    return cookie_store.read_access_token(request)


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Provider = Annotated[OIDCProvider, Depends(get_oidc_provider)]
CookieStore = Annotated[SessionCookieStore, Depends(get_cookie_store)]
CustomerApi = Annotated[CustomerAccountClient, Depends(get_customer_api)]
OptionalAccessToken = Annotated[str | None, Depends(get_access_token)]
