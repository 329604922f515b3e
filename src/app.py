"""GigMatch FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from identity.utils.logging import add_context, clear_context
from reviews.domain import reviews  # noqa: E402
from shared.errors import register_error_handlers
from subscriptions.domain import subscriptions  # noqa: E402

identity.init()
reviews.init()
subscriptions.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/members": identity,
    "/reviews": reviews,
    "/subscriptions": subscriptions,
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
    title="GigMatch API",
    description="Gig marketplace backend: Members, Reviews & Subscriptions",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    add_context(
        request_id=request.headers.get("X-Request-Id") or str(uuid.uuid4()),
        method=request.method,
        path=request.url.path,
    )
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                response = await call_next(request)
            return response
        # No domain match: pass through (health check, docs, etc.)
        return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from identity.api import router as identity_router  # noqa: E402
from reviews.api import review_router  # noqa: E402
from subscriptions.api import subscription_router  # noqa: E402

app.include_router(identity_router)
app.include_router(review_router)
app.include_router(subscription_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "identity": {"name": identity.name},
                "reviews": {"name": reviews.name},
                "subscriptions": {"name": subscriptions.name},
            },
        }
    )
