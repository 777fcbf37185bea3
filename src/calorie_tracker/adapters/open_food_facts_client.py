"""Open Food Facts search API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_FIELDS = "product_name,nutriments,brands,categories"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product search."""

    async def search_products(
        self, term: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by term and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, term: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by term."""
        url = f"{self.base_url}/api/v2/search"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": term,
                "fields": SEARCH_FIELDS,
                "page_size": page_size,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
