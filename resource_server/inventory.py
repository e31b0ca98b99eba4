"""
Inventory service. Port 3004 by default.
Public reads; authenticated stock upsert that triggers the stock notification cascade.
"""
import logging
import math
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field, field_validator

from resource_server.auth import CredentialVerifier, Principal, require_principal
from resource_server.config import HOST, INVENTORY_PORT, LOG_LEVEL, service_port
from resource_server.notifications import ProductNotifier, StockNotifier
from resource_server.seed import seed_inventory
from resource_server.service import build_app
from resource_server.stores import InventoryStore

logger = logging.getLogger(__name__)
router = APIRouter()

STOCK_REQUIRED = "Stock value is required"
STOCK_INVALID = "Stock must be a non-negative number"


class StockUpdate(BaseModel):
    stock: int | float | None = Field(default=None, validate_default=True)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock_is_non_negative_number(cls, value):
        if value is None:
            raise ValueError(STOCK_REQUIRED)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(STOCK_INVALID)
        try:
            as_float = float(value)
        except OverflowError:
            raise ValueError(STOCK_INVALID) from None
        if not math.isfinite(as_float) or value < 0:
            raise ValueError(STOCK_INVALID)
        return value


def get_inventory(request: Request) -> InventoryStore:
    return request.app.state.inventory


def get_notifier(request: Request) -> StockNotifier:
    return request.app.state.notifier


@router.get("/inventory")
def list_inventory(inventory: InventoryStore = Depends(get_inventory)):
    return inventory.list_all()


@router.get("/inventory/{product_id}")
def get_stock(product_id: int, inventory: InventoryStore = Depends(get_inventory)):
    record = inventory.get(product_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Inventory record not found for this product")
    return record


@router.put("/inventory/{product_id}")
async def update_stock(
    product_id: int,
    body: StockUpdate | None = None,
    principal: Principal = Depends(require_principal),
    inventory: InventoryStore = Depends(get_inventory),
    notifier: StockNotifier = Depends(get_notifier),
):
    """
    Any authenticated principal may set any product's stock. Creates the record (warehouse A)
    when absent. The product service is notified afterwards without waiting for it.
    """
    if body is None or body.stock is None:
        raise HTTPException(status_code=400, detail=STOCK_REQUIRED)

    record, previous = inventory.set_stock(product_id, body.stock)
    if previous is None:
        logger.info("Product %s: inventory record created with stock %s", product_id, body.stock)
    else:
        logger.info("Product %s: stock %s -> %s", product_id, previous, body.stock)

    response = {"message": "Inventory updated", "inventory": record}
    notifier.dispatch(product_id, body.stock)
    return response


def create_app(
    inventory: InventoryStore | None = None,
    verifier: CredentialVerifier | None = None,
    notifier: StockNotifier | None = None,
) -> FastAPI:
    notifier = notifier if notifier is not None else ProductNotifier()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Let in-flight stock notifications finish on shutdown."""
        yield
        await notifier.aclose()

    app = build_app(
        title="Inventory Service",
        service_name="inventory-service",
        verifier=verifier,
        lifespan=lifespan,
    )
    app.state.inventory = inventory if inventory is not None else InventoryStore(seed_inventory())
    app.state.notifier = notifier
    app.include_router(router, tags=["inventory"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run(
        "resource_server.inventory:app",
        host=HOST,
        port=service_port(INVENTORY_PORT),
        reload=True,
    )
