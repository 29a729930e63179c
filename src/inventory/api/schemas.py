"""Pydantic request/response schemas for the Inventory API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from inventory.product import Product
from shared.money import to_decimal


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: Decimal
    stock: int = 0
    image_path: str | None = Field(None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Mouse",
                    "description": "Ergonomic 2.4GHz mouse",
                    "price": "24.90",
                    "stock": 50,
                    "image_path": "uploads/mouse.jpg",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: Decimal | None = None
    stock: int | None = None
    image_path: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    price: str
    price_cents: int
    stock: int
    image_path: str | None = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            product_id=product.id,
            name=product.name,
            description=product.description,
            price=str(to_decimal(product.price_cents)),
            price_cents=product.price_cents,
            stock=product.stock,
            image_path=product.image_path,
        )


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
