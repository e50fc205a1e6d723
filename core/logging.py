"""
Logging setup and request logging middleware.

- setup_logging(): configure the root logger once from settings.LOG_LEVEL.
- request_logging_middleware: adds X-Request-ID header (UUID4) to each
  response and request.state; logs method, path, status, latency and request-id.
"""
from starlette.requests import Request
import logging
import time
import uuid
from typing import Callable, Optional

from config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("mailbox.request")

def setup_logging(level: Optional[str] = None) -> None:
    """Configure process-wide logging. `level` overrides settings.LOG_LEVEL."""
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)

async def request_logging_middleware(request: Request, call_next: Callable):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    response = await call_next(request)
    latency = (time.time() - start) * 1000.0
    response.headers["X-Request-ID"] = request_id
    logger.info(
        "id=%s method=%s path=%s status=%s latency_ms=%.2f",
        request_id, request.method, request.url.path, response.status_code, latency,
    )
    return response
