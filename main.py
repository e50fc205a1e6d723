"""
Main FastAPI application (entrypoint).

Responsibilities:
- Wire API routers (notifications, subscriptions)
- Register centralized exception handlers
- Provide request-id logging middleware
- Add health endpoint
- Close the Redis connection on shutdown (when STORE_BACKEND=redis)
Notes:
- With STORE_BACKEND=memory every worker process has its own mailbox; run a
  single worker or switch to redis.
"""
from fastapi import FastAPI
import uvicorn

from api import routes_notifications, routes_subscriptions
from config.settings import settings
from core.exception_handlers import register_exception_handlers
from core.logging import request_logging_middleware, setup_logging
from core.response import ok
from core.singleton import kv_store

setup_logging()

app = FastAPI(title=settings.API_TITLE, version=settings.API_VERSION)

app.include_router(routes_notifications.router, tags=["notifications"])
app.include_router(routes_subscriptions.router, tags=["subscriptions"])

# Register centralized exception handlers
register_exception_handlers(app)

# Add request logging middleware (adds X-Request-ID header and logs)
app.middleware("http")(request_logging_middleware)

@app.get("/health")
async def health():
    """Simple health endpoint used by load balancers and orchestrators."""
    return ok({"status": "ok", "store": settings.STORE_BACKEND})

@app.on_event("shutdown")
async def on_shutdown():
    disconnect = getattr(kv_store, "disconnect", None)
    if disconnect is not None:
        await disconnect()

if __name__ == "__main__":
    # Run with: python main.py for local dev. For production use uvicorn/gunicorn with workers.
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
