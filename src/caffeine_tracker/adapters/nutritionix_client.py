"""Nutritionix API client."""

from dataclasses import dataclass

import httpx

from caffeine_tracker.services.products import NutritionixClient, ProductNotFoundError


@dataclass
class HttpxNutritionixClient(NutritionixClient):
    """HTTPX-backed Nutritionix client."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, app_id: str, app_key: str, base_url: str
    ) -> "HttpxNutritionixClient":
        """Create a Nutritionix client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "x-app-id": self.app_id,
            "x-app-key": self.app_key,
            "x-remote-user-id": "0",
        }

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search common and branded foods."""
        response = await self.http_client.get(
            f"{self.base_url}/search/instant",
            params={"query": query},
            headers=self._headers,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def search_item(self, upc: str) -> dict[str, object]:
        """Look up a branded item by UPC."""
        response = await self.http_client.get(
            f"{self.base_url}/search/item",
            params={"upc": upc},
            headers=self._headers,
            timeout=15,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ProductNotFoundError(f"No product for barcode {upc}")
        response.raise_for_status()
        return response.json()

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Fetch detailed nutrients for a natural-language query."""
        response = await self.http_client.post(
            f"{self.base_url}/natural/nutrients",
            json={"query": query},
            headers=self._headers,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
