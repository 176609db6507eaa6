"""Sama Boutique FastAPI application.

Processes commands synchronously via HTTP, inside the boutique domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from boutique/domain.toml.
from boutique.domain import boutique  # noqa: E402
from boutique.utils.logging import add_context, clear_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

boutique.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Sama Boutique API",
    description="Storefront catalog, cart, checkout and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the boutique domain context and bind request log context."""
    add_context(
        path=request.url.path,
        actor_role=request.headers.get("x-actor-role"),
        actor_id=request.headers.get("x-actor-id"),
    )
    try:
        with boutique.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from boutique.api.errors import register_exception_handlers  # noqa: E402
from boutique.api.routes import (  # noqa: E402
    alert_router,
    cart_router,
    catalog_router,
    invoice_router,
    order_router,
)

register_exception_handlers(app)

app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(invoice_router)
app.include_router(alert_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": {"name": boutique.name},
        }
    )
