"""
Inventory Client - read-only product and stock lookups over HTTP.

Endpoints (JSON):
    GET {base_url}/products/{id}  -> product catalog record
    GET {base_url}/stock/{id}     -> {"id": ..., "amount": ...}
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from rocketcart.errors import (
    ERROR_INVALID_INVENTORY_DATA,
    ERROR_INVENTORY_UNAVAILABLE,
    ERROR_PRODUCT_NOT_FOUND,
    InventoryNotFoundError,
    InventoryTransportError,
)
from rocketcart.logging import get_logger, log_id
from rocketcart.models import Product, Stock

logger = get_logger(__name__)

# Connection-level failures worth retrying; HTTP error statuses are not retried
_TRANSIENT_ERRORS = (httpx.ConnectError, httpx.TimeoutException, httpx.RemoteProtocolError)


class InventoryClient:
    """
    Async client for the inventory API.

    Usage:
        async with InventoryClient("http://localhost:3333") as inventory:
            product = await inventory.get_product(1)
            stock = await inventory.get_stock(1)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "InventoryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, max=2),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _fetch(self, path: str) -> httpx.Response:
        return await self._client.get(f"{self.base_url}{path}")

    async def _get_json(self, path: str, product_id: int) -> dict:
        try:
            response = await self._fetch(path)
        except httpx.HTTPError as e:
            logger.error(f"Inventory request {path} failed: {e}")
            raise InventoryTransportError(f"{ERROR_INVENTORY_UNAVAILABLE}: {e}", product_id) from e

        if response.status_code == 404:
            raise InventoryNotFoundError(ERROR_PRODUCT_NOT_FOUND, product_id)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Inventory request {path} returned {response.status_code}")
            raise InventoryTransportError(f"{ERROR_INVENTORY_UNAVAILABLE}: {e}", product_id) from e

        try:
            data = response.json()
        except ValueError as e:
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id) from e

        if not isinstance(data, dict):
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id)
        return data

    def _check_id(self, record, product_id: int, kind: str):
        if record.id != product_id:
            logger.warning(
                f"Inventory returned {kind} {log_id(record.id)} "
                f"for {log_id(product_id)}"
            )
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id)
        return record

    async def get_product(self, product_id: int) -> Product:
        """
        Fetch the catalog record for a product.

        Raises:
            InventoryNotFoundError: Unknown product id
            InventoryTransportError: Request failed, payload is malformed or
                describes another product
        """
        data = await self._get_json(f"/products/{product_id}", product_id)
        # Quantity belongs to the cart line, not the catalog record
        data.pop("amount", None)
        try:
            product = Product.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed product record for {log_id(product_id)}: {e}")
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id) from e
        return self._check_id(product, product_id, "product")

    async def get_stock(self, product_id: int) -> Stock:
        """
        Fetch the stock record for a product.

        Raises:
            InventoryNotFoundError: Unknown product id
            InventoryTransportError: Request failed, payload is malformed or
                describes another product
        """
        data = await self._get_json(f"/stock/{product_id}", product_id)
        try:
            stock = Stock.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed stock record for {log_id(product_id)}: {e}")
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id) from e
        return self._check_id(stock, product_id, "stock")
