"""Orderline FastAPI application.

Serves the Ordering domain over HTTP, processing commands synchronously.
Each request under an Ordering prefix is wrapped in the domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from ordering/domain.toml:
#   - unset        → in-memory providers
#   - "production" → PostgreSQL from DATABASE_URL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.config import get_settings
from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context, configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_dir)
ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
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
    title="Orderline API",
    description="Order lifecycle, pricing and access rules",
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
    """Push the Ordering domain context for each order request."""
    clear_context()
    add_context(http_method=request.method, http_path=request.url.path)

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from ordering.api.errors import register_exception_handlers  # noqa: E402
from ordering.api.routes import order_router  # noqa: E402

app.include_router(order_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
            },
        }
    )
