"""Main FastAPI application for the storefront API."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront_api import __version__
from storefront_api.auth.customer_account import CustomerAccountClient
from storefront_api.auth.errors import CustomerAuthError
from storefront_api.auth.oidc import OIDCProvider
from storefront_api.auth.routes import handle_customer_auth_error, router as account_router
from storefront_api.auth.session import SessionCookieStore
from storefront_api.config import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info("Starting storefront API...")
    logger.info(f"Customer login configured for shop: {settings.shopify_customer_shop_id}")
    logger.info(f"Redirect URI: {settings.redirect_uri}")

    yield

    logger.info("Shutting down storefront API...")
    if app.state.owns_http_client:
        await app.state.http_client.aclose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code},
    )


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the application and wire its components.

    ``http_client`` carries every outbound call (discovery, token exchange,
    Customer API); pass one with a mock transport in tests.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    owns_http_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    app = FastAPI(
        title="Storefront API",
        description="Storefront backend with Shopify customer account login",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        openapi_url=None if settings.is_production else "/openapi.json",
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.owns_http_client = owns_http_client
    app.state.oidc_provider = OIDCProvider(settings, http_client)
    app.state.cookie_store = SessionCookieStore(settings)
    app.state.customer_api = CustomerAccountClient(settings.customer_api_url, http_client)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(CustomerAuthError, handle_customer_auth_error)

    app.include_router(account_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "storefront-api"}

    @app.get("/")
    async def root():
        """Root endpoint with service information."""
        return {
            "service": "Storefront API",
            "version": __version__,
            "login_url": "/account/login",
            "docs_url": app.docs_url,
        }

    return app
