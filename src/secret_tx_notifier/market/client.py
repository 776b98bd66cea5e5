from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .. import __version__
from .models import PriceQuote, TokenMeta

logger = logging.getLogger(__name__)

PRICES_QUERY = """
query Prices {
  prices(query: {}) {
    id
    value
  }
}
"""

TOKENS_QUERY = """
query Tokens {
  tokens(query: {
    where: {
      flags: {
        has: SNIP20
      }
    }
  }) {
    id
    contractAddress
    symbol
    Asset {
      decimals
    }
    PriceToken {
      priceId
    }
  }
}
"""


class GraphQLError(RuntimeError):
    def __init__(self, operation: str, errors: list[Any] | None):
        self.operation = operation
        self.errors = errors or []
        messages = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in self.errors]
        detail = "; ".join(messages) if messages else "no data returned"
        super().__init__(f"GraphQL {operation} errors: {detail}")


class MarketDataClient:
    """
    Token metadata and USD prices from the GraphQL API.
    Every response is a {data, errors} envelope; populated `errors` or a
    missing `data` raise GraphQLError.
    """

    def __init__(self, url: str, timeout: float = 20.0):
        self._url = url

        self._client = httpx.Client(
            headers={"User-Agent": f"secret-tx-notifier/{__version__}"},
            timeout=httpx.Timeout(timeout),
        )

    def close(self) -> None:
        self._client.close()

    def _query(self, operation: str, query: str) -> dict[str, Any]:
        try:
            resp = self._client.post(self._url, json={"query": query})
        except httpx.HTTPError as e:
            raise RuntimeError(f"GraphQL request failed: {operation}. Error: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise RuntimeError(
                f"GraphQL API error: {resp.status_code} {resp.reason_phrase}. Response: {resp.text}"
            ) from e

        if not isinstance(body, dict):
            raise GraphQLError(operation, None)

        errors = body.get("errors")
        data = body.get("data")
        if errors or not isinstance(data, dict):
            raise GraphQLError(operation, errors if isinstance(errors, list) else None)

        return data

    def fetch_prices(self) -> list[PriceQuote]:
        data = self._query("Prices", PRICES_QUERY)
        try:
            return [PriceQuote.model_validate(x) for x in data.get("prices") or []]
        except ValidationError as e:
            raise GraphQLError("Prices", [{"message": f"unexpected price shape: {e}"}]) from e

    def fetch_tokens(self) -> list[TokenMeta]:
        data = self._query("Tokens", TOKENS_QUERY)
        try:
            return [TokenMeta.model_validate(x) for x in data.get("tokens") or []]
        except ValidationError as e:
            raise GraphQLError("Tokens", [{"message": f"unexpected token shape: {e}"}]) from e
