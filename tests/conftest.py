"""Shared fixtures: settings and a fake Shopify identity/customer API."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront_api.config import Settings
from storefront_api.main import create_app

SHOP_ID = "12345"
CLIENT_ID = "shp_client_abc"
APP_URL = "https://barber.example.com"

DISCOVERY_URL = f"https://shopify.com/authentication/{SHOP_ID}/.well-known/openid-configuration"
AUTHORIZE_URL = f"https://shopify.com/authentication/{SHOP_ID}/oauth/authorize"
TOKEN_URL = f"https://shopify.com/authentication/{SHOP_ID}/oauth/token"
GRAPHQL_URL = f"https://shopify.com/{SHOP_ID}/account/customer/api/unstable/graphql"

CUSTOMER = {
    "id": "gid://shopify/Customer/1",
    "firstName": "Ada",
    "lastName": "Lovelace",
    "emailAddress": {"emailAddress": "ada@example.com"},
}


class FakeShopify:
    """Routes outbound requests to canned discovery, token and GraphQL answers."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.discovery: tuple[int, Any] = (
            200,
            {
                "issuer": f"https://shopify.com/authentication/{SHOP_ID}",
                "authorization_endpoint": AUTHORIZE_URL,
                "token_endpoint": TOKEN_URL,
                "end_session_endpoint": f"https://shopify.com/authentication/{SHOP_ID}/logout",
            },
        )
        self.token: tuple[int, Any] = (
            200,
            {"access_token": "tok1", "expires_in": 3600, "token_type": "Bearer"},
        )
        self.graphql: tuple[int, Any] = (200, {"data": {"customer": CUSTOMER}})
        self.discovery_delay = 0.0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/.well-known/openid-configuration"):
            if self.discovery_delay:
                await asyncio.sleep(self.discovery_delay)
            status, body = self.discovery
        elif path.endswith("/oauth/token"):
            status, body = self.token
        elif path.endswith("/graphql"):
            status, body = self.graphql
        else:
            status, body = 404, {"error": "not_found"}

        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls_to(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def parse_set_cookies(headers: list[str]) -> dict[str, tuple[str, str]]:
    """Map cookie name -> (value, lower-cased full header) from Set-Cookie headers."""
    cookies = {}
    for header in headers:
        name, _, rest = header.partition("=")
        value = rest.split(";", 1)[0].strip('"')
        cookies[name.strip()] = (value, header.lower())
    return cookies


@pytest.fixture
def settings() -> Settings:
    return Settings(
        shopify_customer_shop_id=SHOP_ID,
        shopify_customer_client_id=CLIENT_ID,
        app_url=APP_URL,
        server_env="development",
    )


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def app(settings: Settings, fake_shopify: FakeShopify):
    return create_app(settings, http_client=fake_shopify.client())


@pytest.fixture
def client(app):
    with TestClient(app, follow_redirects=False) as c:
        yield c
