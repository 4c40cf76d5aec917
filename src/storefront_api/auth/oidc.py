"""OIDC client for the Shopify Customer Account identity provider."""

import asyncio
import logging
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from storefront_api.auth.errors import DiscoveryError, TokenExchangeError
from storefront_api.auth.models import OpenIdConfiguration, TokenSet
from storefront_api.config import Settings

logger = logging.getLogger(__name__)


class DiscoveryDocumentCache:
    """Fetches the OpenID configuration once and keeps it for the life of the process.

    Concurrent first calls share a single upstream fetch and see the same
    outcome, success or DiscoveryError. Failed fetches are not cached, so a
    later request tries again.
    """

    def __init__(self, discovery_url: str, http_client: httpx.AsyncClient):
        self.discovery_url = discovery_url
        self._http_client = http_client
        self._config: OpenIdConfiguration | None = None
        self._inflight: asyncio.Task[OpenIdConfiguration] | None = None

    async def get(self) -> OpenIdConfiguration:
        """Return the discovery document, fetching it on first use."""
        if self._config is not None:
            return self._config

        if self._inflight is None:
            self._inflight = asyncio.create_task(self._populate())
        # shield: a cancelled caller must not cancel the fetch other callers await
        return await asyncio.shield(self._inflight)

    async def _populate(self) -> OpenIdConfiguration:
        try:
            self._config = await self._fetch()
            return self._config
        finally:
            self._inflight = None

    def invalidate(self) -> None:
        """Drop the cached document so the next call fetches it again."""
        self._config = None

    async def _fetch(self) -> OpenIdConfiguration:
        logger.info(f"Fetching OpenID configuration from {self.discovery_url}")
        try:
            resp = await self._http_client.get(self.discovery_url)
        except httpx.HTTPError as e:
            raise DiscoveryError(f"OpenID discovery request failed: {e.__class__.__name__}") from e

        if not resp.is_success:
            raise DiscoveryError(f"OpenID discovery failed: {resp.status_code}")

        try:
            return OpenIdConfiguration.model_validate_json(resp.content)
        except ValidationError as e:
            raise DiscoveryError("OpenID discovery document is malformed") from e


def build_authorization_url(
    config: OpenIdConfiguration,
    *,
    client_id: str,
    redirect_uri: str,
    scopes: list[str],
    state: str,
    code_challenge: str,
    locale: str | None = None,
) -> str:
    """Build the provider authorization URL for a login attempt."""
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes),
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    if locale:
        params["locale"] = locale

    endpoint = config.authorization_endpoint
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}{urlencode(params)}"


class TokenExchangeClient:
    """Exchanges an authorization code plus PKCE verifier for tokens.

    Authorization codes are single-use, so a failed exchange is never retried.
    """

    def __init__(self, http_client: httpx.AsyncClient, client_id: str, redirect_uri: str):
        self._http_client = http_client
        self.client_id = client_id
        self.redirect_uri = redirect_uri

    async def exchange(
        self,
        config: OpenIdConfiguration,
        code: str,
        code_verifier: str,
    ) -> TokenSet:
        """Exchange authorization code for tokens."""
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "code": code,
            "redirect_uri": self.redirect_uri,
            "code_verifier": code_verifier,
        }

        try:
            resp = await self._http_client.post(
                config.token_endpoint,
                data=data,
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise TokenExchangeError(
                f"Token endpoint unreachable: {e.__class__.__name__}",
                error="temporarily_unavailable",
            ) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            raise TokenExchangeError(
                f"Token endpoint returned a non-JSON response ({resp.status_code})",
                error="invalid_token_response",
            )

        if not resp.is_success or body.get("error"):
            error = body.get("error")
            description = body.get("error_description")
            # Providers and proxies do not always send strings here
            if not isinstance(error, str) or not error:
                error = "token_exchange_failed"
            if not isinstance(description, str) or not description:
                description = f"Token exchange failed ({resp.status_code})"
            logger.error(f"Token exchange failed: {resp.status_code} {error}")
            raise TokenExchangeError(description, error=error)

        try:
            return TokenSet.model_validate(body)
        except ValidationError as e:
            raise TokenExchangeError(
                "Token response is missing an access token",
                error="invalid_token_response",
            ) from e


class OIDCProvider:
    """Shopify Customer Account login: discovery, authorization URL and code exchange."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.discovery = DiscoveryDocumentCache(settings.discovery_url, http_client)
        self.token_client = TokenExchangeClient(
            http_client,
            client_id=settings.shopify_customer_client_id,
            redirect_uri=settings.redirect_uri,
        )

    async def get_openid_configuration(self) -> OpenIdConfiguration:
        """Fetch (or return the cached) OIDC discovery document."""
        return await self.discovery.get()

    async def build_authorization_url(self, state: str, code_challenge: str) -> str:
        """Build the authorization URL the browser is redirected to."""
        config = await self.get_openid_configuration()
        return build_authorization_url(
            config,
            client_id=self.settings.shopify_customer_client_id,
            redirect_uri=self.settings.redirect_uri,
            scopes=self.settings.scopes,
            state=state,
            code_challenge=code_challenge,
            locale=self.settings.login_locale,
        )

    async def exchange_code_for_tokens(self, code: str, code_verifier: str) -> TokenSet:
        """Exchange authorization code for tokens."""
        config = await self.get_openid_configuration()
        return await self.token_client.exchange(config, code, code_verifier)
