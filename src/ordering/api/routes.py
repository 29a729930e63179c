"""FastAPI routes for the Ordering domain: cart, checkout and orders."""

import structlog
from fastapi import APIRouter, Depends, Response

from identity.context import AuthContext
from identity.session import Session
from identity.web import get_auth_context, get_web_session, persist_session
from notifications.notification.order_confirmation import OrderConfirmationNotifier
from ordering.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CartValidationResponse,
    CheckoutRequest,
    OrderIdResponse,
    OrderResponse,
    OrderStatsResponse,
    OrderSummaryResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.cart import CartStore
from ordering.checkout.coordinator import CheckoutCoordinator
from ordering.checkout.details import CustomerDetails
from ordering.order.administration import update_order_status
from ordering.order.viewing import list_my_orders, list_orders, status_counts, view_order
from shared.money import to_decimal

logger = structlog.get_logger(__name__)


def _cart_response(cart: CartStore) -> CartResponse:
    lines = [CartLineResponse.from_line(line) for line in cart.list()]
    total_cents = sum(line.subtotal_cents for line in lines)
    return CartResponse(
        items=lines,
        count=sum(line.quantity for line in lines),
        total=str(to_decimal(total_cents)),
        total_cents=total_cents,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(session: Session = Depends(get_web_session)) -> CartResponse:
    return _cart_response(CartStore(session))


@cart_router.post("/items", response_model=CartResponse)
def add_cart_item(
    body: AddToCartRequest, response: Response, session: Session = Depends(get_web_session)
) -> CartResponse:
    cart = CartStore(session)
    cart.add(body.product_id, body.quantity)
    persist_session(response, session)
    return _cart_response(cart)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
def update_cart_item_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    response: Response,
    session: Session = Depends(get_web_session),
) -> CartResponse:
    cart = CartStore(session)
    cart.set_quantity(product_id, body.quantity)
    persist_session(response, session)
    return _cart_response(cart)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
def remove_cart_item(product_id: str, response: Response, session: Session = Depends(get_web_session)) -> CartResponse:
    cart = CartStore(session)
    cart.remove(product_id)
    persist_session(response, session)
    return _cart_response(cart)


@cart_router.delete("", response_model=CartResponse)
def clear_cart(response: Response, session: Session = Depends(get_web_session)) -> CartResponse:
    cart = CartStore(session)
    cart.clear()
    persist_session(response, session)
    return _cart_response(cart)


@cart_router.get("/validation", response_model=CartValidationResponse)
def validate_cart(session: Session = Depends(get_web_session)) -> CartValidationResponse:
    messages = CartStore(session).validate_against_stock()
    return CartValidationResponse(valid=not messages, messages=messages)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=OrderIdResponse)
def checkout(
    body: CheckoutRequest,
    response: Response,
    session: Session = Depends(get_web_session),
    ctx: AuthContext = Depends(get_auth_context),
) -> OrderIdResponse:
    """Place an order for the session's cart.

    1. Validate customer details
    2. Create the order and take stock in one unit of work
    3. Clear the cart and send the confirmation email

    The order is committed by the time the emptied cart is saved. If that
    save fails the order still stands and the response still reports it.
    """
    details = CustomerDetails.create(name=body.name, email=body.email, phone=body.phone, address=body.address)
    coordinator = CheckoutCoordinator(OrderConfirmationNotifier())

    order_id = coordinator.checkout(CartStore(session), ctx, details)

    try:
        persist_session(response, session)
    except Exception:
        logger.exception("Session could not be saved after checkout", order_id=order_id)

    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(tags=["orders"])


@order_router.get("/me/orders", response_model=list[OrderSummaryResponse])
def my_orders(ctx: AuthContext = Depends(get_auth_context)) -> list[OrderSummaryResponse]:
    return [OrderSummaryResponse.from_order(order) for order in list_my_orders(ctx)]


@order_router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, ctx: AuthContext = Depends(get_auth_context)) -> OrderResponse:
    return OrderResponse.from_order(view_order(ctx, order_id))


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_order_router.get("", response_model=list[OrderSummaryResponse])
def all_orders(
    status: str | None = None,
    search: str | None = None,
    ctx: AuthContext = Depends(get_auth_context),
) -> list[OrderSummaryResponse]:
    return [OrderSummaryResponse.from_order(order) for order in list_orders(ctx, status=status, search=search)]


@admin_order_router.get("/stats", response_model=OrderStatsResponse)
def order_stats(ctx: AuthContext = Depends(get_auth_context)) -> OrderStatsResponse:
    counts = status_counts(ctx)
    return OrderStatsResponse(counts=counts, total=sum(counts.values()))


@admin_order_router.put("/{order_id}/status", response_model=OrderResponse)
def change_order_status(
    order_id: str, body: UpdateOrderStatusRequest, ctx: AuthContext = Depends(get_auth_context)
) -> OrderResponse:
    return OrderResponse.from_order(update_order_status(ctx, order_id, body.status))
