"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the domain model and the
CartStore's internal session payload.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ordering.cart.cart import CartLine
from ordering.order.order import Order, OrderItem
from shared.money import to_decimal


def _amount(cents: int) -> str:
    return str(to_decimal(cents))


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {"json_schema_extra": {"examples": [{"product_id": "0b7c5e2e-6d1f-4a53-9a0e-3f4d2c1b8a97", "quantity": 2}]}}


class UpdateCartQuantityRequest(BaseModel):
    quantity: int

    model_config = {"json_schema_extra": {"examples": [{"quantity": 3}]}}


class CheckoutRequest(BaseModel):
    name: str = Field("", max_length=255)
    email: str = Field("", max_length=254)
    phone: str = Field("", max_length=50)
    address: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "phone": "+351 912 345 678",
                    "address": "Rua Augusta 100, 1100-053 Lisboa",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "shipped"}]}}


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------
class CartLineResponse(BaseModel):
    product_id: str
    name: str
    unit_price: str
    unit_price_cents: int
    quantity: int
    subtotal: str
    subtotal_cents: int
    stock: int
    image_path: str | None = None

    @classmethod
    def from_line(cls, line: CartLine) -> "CartLineResponse":
        return cls(
            product_id=line.product_id,
            name=line.name,
            unit_price=_amount(line.unit_price_cents),
            unit_price_cents=line.unit_price_cents,
            quantity=line.quantity,
            subtotal=_amount(line.subtotal_cents),
            subtotal_cents=line.subtotal_cents,
            stock=line.stock,
            image_path=line.image_path,
        )


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    count: int
    total: str
    total_cents: int


class CartValidationResponse(BaseModel):
    valid: bool
    messages: list[str]


class OrderIdResponse(BaseModel):
    order_id: str


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: str
    price_cents: int
    subtotal_cents: int

    @classmethod
    def from_item(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=_amount(item.price_cents),
            price_cents=item.price_cents,
            subtotal_cents=item.subtotal_cents,
        )


class OrderSummaryResponse(BaseModel):
    order_id: str
    customer_name: str
    customer_email: str
    status: str
    total: str
    total_cents: int
    created_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderSummaryResponse":
        return cls(
            order_id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            status=order.status,
            total=_amount(order.total_cents),
            total_cents=order.total_cents,
            created_at=order.created_at,
        )


class OrderResponse(OrderSummaryResponse):
    user_id: str | None = None
    phone: str
    address: str
    updated_at: datetime | None = None
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.id,
            user_id=order.user_id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            phone=order.phone,
            address=order.address,
            status=order.status,
            total=_amount(order.total_cents),
            total_cents=order.total_cents,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.from_item(item) for item in order.sorted_items],
        )


class OrderStatsResponse(BaseModel):
    counts: dict[str, int]
    total: int
