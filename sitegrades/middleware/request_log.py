import time

from fastapi import Request

from sitegrades.utils.log import app_logger


async def log_requests(request: Request, call_next):
    """Log method, path, status code and duration of every request."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        app_logger.error(
            "http.request",
            method=request.method,
            path=request.url.path,
            status_code=500,
            error=str(e),
        )
        raise
    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
    app_logger.info(
        "http.request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=elapsed_ms,
    )
    return response
