"""Bearer-authenticated client for the Shopify Customer Account GraphQL API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from storefront_api.auth.errors import GraphQLExecutionError, GraphQLTransportError

logger = logging.getLogger(__name__)

CURRENT_CUSTOMER_QUERY = """
query {
  customer {
    id
    firstName
    lastName
    emailAddress {
      emailAddress
    }
  }
}
"""


class CustomerAccountClient:
    """Runs GraphQL queries on behalf of a logged-in customer.

    Does not retry and does not refresh tokens; an expired token surfaces as
    a ``GraphQLTransportError`` with ``upstream_status == 401``.
    """

    def __init__(self, endpoint: str, http_client: httpx.AsyncClient):
        self.endpoint = endpoint
        self._http_client = http_client

    async def query(
        self,
        access_token: str,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = await self._http_client.post(
                self.endpoint,
                json={"query": document, "variables": variables},
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            raise GraphQLTransportError(
                f"Customer API request failed: {e.__class__.__name__}"
            ) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.is_success:
            message = "Customer API request failed"
            if isinstance(body, dict) and isinstance(body.get("error"), str):
                message = body["error"]
            logger.warning(f"Customer API returned {resp.status_code}")
            raise GraphQLTransportError(message, upstream_status=resp.status_code)

        if not isinstance(body, dict):
            raise GraphQLTransportError(
                "Customer API returned a non-JSON response",
                upstream_status=resp.status_code,
            )

        errors = body.get("errors")
        if errors:
            message = None
            if isinstance(errors, list):
                first = errors[0]
                message = first.get("message") if isinstance(first, dict) else first
            if not isinstance(message, str) or not message:
                message = "Customer API query failed"
            raise GraphQLExecutionError(message)

        return body.get("data") or {}
