"""REST market-data client."""
import json
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from sourcewise.core.errors import CollaboratorUnavailable
from sourcewise.data.interfaces import BaseMarketDataService
from sourcewise.models import CompetitorPrices, DemandForecast, PriceBand


def _product_path(product: str, resource: str) -> str:
    return f"/v1/products/{quote(product, safe='')}/{resource}"


class HTTPMarketDataService(BaseMarketDataService):
    """
    Market data fetched from a REST backend.

    Endpoints (JSON):
    - GET /v1/products/{product}/price-band?specs=<json>  -> {min, max, avg}
    - GET /v1/products/{product}/demand                   -> {trend, factor}
    - GET /v1/products/{product}/competitors              -> {prices, sources}

    A 404 means the backend has no data for the product (None is returned).
    Transport errors, other error statuses and malformed payloads raise
    CollaboratorUnavailable.
    """

    name = "market_data"

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def get_price_band(self, product: str, specs: dict[str, Any]) -> PriceBand | None:
        params = {"specs": json.dumps(specs, sort_keys=True, default=str)} if specs else None
        return await self._get(_product_path(product, "price-band"), PriceBand, params)

    async def get_demand_forecast(self, product: str) -> DemandForecast | None:
        return await self._get(_product_path(product, "demand"), DemandForecast)

    async def get_competitor_prices(self, product: str) -> CompetitorPrices | None:
        return await self._get(_product_path(product, "competitors"), CompetitorPrices)

    async def _get(
        self,
        path: str,
        model: type[BaseModel],
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise CollaboratorUnavailable(self.name, f"{type(e).__name__}: {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise CollaboratorUnavailable(self.name, f"HTTP {response.status_code} for {path}")

        try:
            return model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise CollaboratorUnavailable(self.name, f"malformed payload for {path}") from e

    async def close(self) -> None:
        await self._client.aclose()
