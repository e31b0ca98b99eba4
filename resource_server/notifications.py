"""
Inventory -> product stock notification cascade.
Best effort: dispatched as a background task after the stock write is applied, bounded by a
timeout, logged on failure, never retried and never surfaced to the inventory caller.
The product service's notify endpoint is unauthenticated (trusted internal network).
"""
import asyncio
import logging
from typing import Protocol

import httpx

from resource_server.config import NOTIFY_TIMEOUT_SECONDS, PRODUCT_SERVICE_URL

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 5
OUT_OF_STOCK_MESSAGE = "Product is out of stock"
LOW_STOCK_MESSAGE = "Product has low stock"
STOCK_UPDATED_MESSAGE = "Stock level updated"


def stock_message(stock: int | float) -> str:
    if stock == 0:
        return OUT_OF_STOCK_MESSAGE
    if stock <= LOW_STOCK_THRESHOLD:
        return LOW_STOCK_MESSAGE
    return STOCK_UPDATED_MESSAGE


class StockNotifier(Protocol):
    def dispatch(self, product_id: int, stock: int | float) -> None:
        ...

    async def aclose(self) -> None:
        ...


class ProductNotifier:
    """POSTs {productId, stock, message} to PRODUCT_SERVICE_URL/products/{id}/notify."""

    def __init__(
        self,
        base_url: str = PRODUCT_SERVICE_URL,
        *,
        timeout: float = NOTIFY_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, product_id: int, stock: int | float) -> asyncio.Task:
        """Schedule the notification on the running loop and return immediately."""
        task = asyncio.create_task(self.send(product_id, stock))
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Stock notification crashed", exc_info=task.exception())

    async def send(self, product_id: int, stock: int | float) -> bool:
        """One attempt. Returns True if the product service acknowledged with 2xx."""
        payload = {"productId": product_id, "stock": stock, "message": stock_message(stock)}
        url = f"{self.base_url}/products/{product_id}/notify"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Could not reach product service for product %s: %s", product_id, e)
            return False
        if not response.is_success:
            logger.warning(
                "Product service notification failed for product %s: %s",
                product_id,
                response.status_code,
            )
            return False
        logger.info("Notified product service about product %s (stock: %s)", product_id, stock)
        return True

    async def drain(self) -> None:
        """Wait for in-flight notifications (each is bounded by the timeout)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
