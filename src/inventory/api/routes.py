"""FastAPI routes for the Inventory domain: product reads and admin management."""

from fastapi import APIRouter, Depends

from identity.context import AuthContext
from identity.web import get_auth_context
from inventory import management
from inventory.api.schemas import (
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)
from inventory.domain import inventory
from inventory.product import Product

# ---------------------------------------------------------------------------
# Product Router (public)
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
def list_products() -> list[ProductResponse]:
    products = inventory.repository_for(Product).list_all()
    return [ProductResponse.from_product(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(inventory.repository_for(Product).get(product_id))


# ---------------------------------------------------------------------------
# Admin Product Router
# ---------------------------------------------------------------------------
admin_product_router = APIRouter(prefix="/admin/products", tags=["admin"])


@admin_product_router.post("", status_code=201, response_model=ProductIdResponse)
def create_product(body: CreateProductRequest, ctx: AuthContext = Depends(get_auth_context)) -> ProductIdResponse:
    product = management.create_product(
        ctx,
        name=body.name,
        price=body.price,
        stock=body.stock,
        description=body.description,
        image_path=body.image_path,
    )
    return ProductIdResponse(product_id=product.id)


@admin_product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str, body: UpdateProductRequest, ctx: AuthContext = Depends(get_auth_context)
) -> ProductResponse:
    changes = body.model_dump(exclude_unset=True)
    product = management.update_product(ctx, product_id, **changes)
    return ProductResponse.from_product(product)


@admin_product_router.delete("/{product_id}", response_model=StatusResponse)
def delete_product(product_id: str, ctx: AuthContext = Depends(get_auth_context)) -> StatusResponse:
    management.delete_product(ctx, product_id)
    return StatusResponse()
