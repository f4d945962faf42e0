import logging
import time

from fastapi import Request

logger = logging.getLogger("splitledger.requests")

async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed = (time.perf_counter() - start) * 1000
        logger.exception("%s %s failed after %.1fms", request.method, request.url.path, elapsed)
        raise

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s in %.1fms (client=%s, auth=%s)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
        request.client.host if request.client else "unknown",
        "yes" if request.cookies.get("access_token") or request.headers.get("Authorization") else "no",
    )
    return response
