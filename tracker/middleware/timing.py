import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)


async def timing_middleware(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000

    response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.2f}ms",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
        },
    )
    return response
