"""
Product service. Port 3003 by default.
Public reads, admin-only create, and the internal stock notification endpoint.
"""
import logging
import math

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictFloat, StrictStr, field_validator

from resource_server.auth import CredentialVerifier, Principal, require_admin
from resource_server.config import HOST, LOG_LEVEL, PRODUCT_PORT, service_port
from resource_server.notifications import LOW_STOCK_THRESHOLD, stock_message
from resource_server.seed import seed_products
from resource_server.service import build_app
from resource_server.stores import ProductStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


class ProductCreate(BaseModel):
    name: StrictStr | None = None
    price: float | None = None
    description: StrictStr | None = None
    category: StrictStr | None = None
    image: StrictStr | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_is_number(cls, value):
        # No coercion from strings or booleans
        if value is not None and not _is_number(value):
            raise ValueError("Price must be a positive number")
        return value


class StockNotification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: StrictInt | None = Field(default=None, alias="productId")
    stock: StrictInt | StrictFloat
    message: StrictStr | None = None


def get_products(request: Request) -> ProductStore:
    return request.app.state.products


@router.get("/products")
def list_products(products: ProductStore = Depends(get_products)):
    return products.list_all()


@router.get("/products/{product_id}")
def get_product(product_id: int, products: ProductStore = Depends(get_products)):
    product = products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/products", status_code=201)
def create_product(
    body: ProductCreate | None = None,
    principal: Principal = Depends(require_admin),
    products: ProductStore = Depends(get_products),
):
    """Admin only. name and price required; other fields default."""
    if body is None or not body.name or not body.price:
        raise HTTPException(status_code=400, detail="Name and price are required")
    if body.price < 0:
        raise HTTPException(status_code=400, detail="Price must be a positive number")

    product = products.create(
        body.name,
        body.price,
        description=body.description,
        category=body.category,
        image=body.image,
    )
    logger.info("New product created: %s (id: %s) by '%s'", product["name"], product["id"], principal.username)
    return product


@router.post("/products/{product_id}/notify")
def notify(
    product_id: int,
    body: StockNotification,
    products: ProductStore = Depends(get_products),
):
    """Internal, unauthenticated: stock change notice from the inventory service."""
    product = products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    message = body.message or stock_message(body.stock)
    logger.info('Inventory notification for "%s": %s (stock: %s)', product["name"], message, body.stock)
    if body.stock == 0:
        logger.warning('"%s" is now OUT OF STOCK', product["name"])
    elif body.stock <= LOW_STOCK_THRESHOLD:
        logger.warning('"%s" has LOW STOCK (%s remaining)', product["name"], body.stock)
    return {"received": True}


def create_app(
    products: ProductStore | None = None,
    verifier: CredentialVerifier | None = None,
) -> FastAPI:
    app = build_app(title="Product Service", service_name="product-service", verifier=verifier)
    app.state.products = products if products is not None else ProductStore(seed_products())
    app.include_router(router, tags=["products"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run(
        "resource_server.products:app",
        host=HOST,
        port=service_port(PRODUCT_PORT),
        reload=True,
    )
