"""Storefront FastAPI application.

Serves the product catalogue, the session cart, checkout and order history
as a JSON API. Each request runs inside the domain context its URL belongs
to, and is logged with a request id bound into the structlog context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import time
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.logging import add_context, clear_context, configure_logging

configure_logging()

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay from pyproject.toml; all three
# domains must point at the same database.
from identity.domain import identity  # noqa: E402
from inventory.domain import inventory  # noqa: E402
from ordering.domain import ordering  # noqa: E402

identity.init()
inventory.init()
ordering.init()

from identity.session import SqlSessionStore, set_session_store  # noqa: E402
from shared.api import register_exception_handlers  # noqa: E402
from shared.config import get_settings  # noqa: E402

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Session persistence
# ---------------------------------------------------------------------------
# SESSION_BACKEND=sql keeps sessions in the database so that several workers
# share them; the default in-memory store only suits a single process.
if get_settings().session_backend == "sql":
    set_session_store(SqlSessionStore(identity))

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
# Checked in order: "/me/orders" must win over "/me"
_ROUTE_DOMAIN_MAP = {
    "/me/orders": ordering,
    "/me": identity,
    "/register": identity,
    "/login": identity,
    "/logout": identity,
    "/products": inventory,
    "/admin/products": inventory,
    "/cart": ordering,
    "/checkout": ordering,
    "/orders": ordering,
    "/admin/orders": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title=f"{get_settings().app_name} API",
    description="Storefront: catalogue, cart, checkout and orders",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id to every log line emitted while serving the request."""
    clear_context()
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex[:16], path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        logger.debug(
            "Request served",
            method=request.method,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from identity.api.routes import router as identity_router  # noqa: E402
from inventory.api import admin_product_router, product_router  # noqa: E402
from ordering.api.routes import (  # noqa: E402
    admin_order_router,
    cart_router,
    checkout_router,
    order_router,
)

app.include_router(identity_router)
app.include_router(product_router)
app.include_router(admin_product_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(admin_order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "app": settings.app_name,
            "environment": settings.environment,
            "domains": {
                "identity": {"name": identity.name},
                "inventory": {"name": inventory.name},
                "ordering": {"name": ordering.name},
            },
        }
    )
