"""CLI for running and checking the storefront API."""

import argparse
import asyncio
import sys

import httpx
import uvicorn

from storefront_api.auth.errors import DiscoveryError
from storefront_api.auth.oidc import DiscoveryDocumentCache
from storefront_api.config import Settings, get_settings


def serve(host: str, port: int, reload: bool = False) -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "storefront_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


async def check_discovery(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> bool:
    """Fetch the OpenID discovery document and print the login endpoints."""
    client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    try:
        cache = DiscoveryDocumentCache(settings.discovery_url, client)
        config = await cache.get()
    except DiscoveryError as e:
        print(f"✗ Discovery failed: {e}")
        print(f"  URL: {settings.discovery_url}")
        return False
    finally:
        if http_client is None:
            await client.aclose()

    print("✓ Discovery document loaded")
    print(f"  Authorization endpoint: {config.authorization_endpoint}")
    print(f"  Token endpoint: {config.token_endpoint}")
    print(f"  Redirect URI to register: {settings.redirect_uri}")
    return True


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront API CLI",
        prog="storefront-api",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: SERVER_HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: SERVER_PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser(
        "check-discovery",
        help="Check the Shopify OpenID discovery document for the configured shop",
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        settings = get_settings()
        serve(
            host=args.host or settings.server_host,
            port=args.port or settings.server_port,
            reload=args.reload,
        )

    elif args.command == "check-discovery":
        success = asyncio.run(check_discovery(get_settings()))
        sys.exit(0 if success else 1)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
