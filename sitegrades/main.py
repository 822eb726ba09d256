from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from sitegrades.api.servers import router as servers_router
from sitegrades.config.settings import settings
from sitegrades.core.exceptions.exceptions import AppError
from sitegrades.middleware.request_log import log_requests
from sitegrades.services.database import engine, init_db
from sitegrades.utils.log import app_logger


def log_routes(app: FastAPI) -> None:
    for route in app.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods):
                app_logger.info("app.route", method=method, path=route.path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    log_routes(app)
    if settings.DB_CREATE_SCHEMA:
        init_db(engine)
        app_logger.info("app.schema_ready", database=engine.url.render_as_string(hide_password=True))
    yield
    # Shutdown logic: release every pooled connection
    engine.dispose()
    app_logger.info("app.shutdown")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    # errors no route handled: answer 500 and keep serving
    app_logger.error("app.unhandled_error", path=request.url.path, exc_type=type(exc).__name__, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app = FastAPI(title="sitegrades", lifespan=lifespan)

app.middleware("http")(log_requests)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_exception_handler(AppError, app_error_handler)

# include routes
app.include_router(servers_router)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
