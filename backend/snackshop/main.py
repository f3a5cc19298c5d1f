"""SnackShop Backend - FastAPI application

Builds the ASGI app for the snack storefront:
- Shop API under /api/v1/shop, health/metrics at the root
- Request-ID and CORS middleware
- JSON error bodies for validation, storage and unexpected failures
- Startup wiring of the ShopContext and background model preloading

Run locally with ``uvicorn snackshop.main:app --reload``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, get_settings
from .dependencies import build_context
from .domain.storage import KeyValueStoreError
from .observability.logging_config import configure_logging
from .observability.middleware import REQUEST_ID_HEADER, RequestIDMiddleware
from .observability.router import router as observability_router
from .shop.router import router as shop_router

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def _error_body(error: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"error": error, "message": message, **extra}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the ShopContext on startup and stop the preloader on shutdown.

    A context already present on app.state (installed by tests) is used as is.
    """
    settings: Settings = app.state.settings
    logger.info(f"SnackShop API starting ({settings.ENVIRONMENT})")

    context = getattr(app.state, "shop", None)
    if context is None:
        if settings.KV_BACKEND.lower() == "sql":
            from .database import init_db
            init_db()
        context = build_context(settings)
        app.state.shop = context

    if context.settings.PRELOAD_MODELS:
        context.preloader.start()

    yield

    await context.preloader.stop()
    logger.info("SnackShop API stopped")


def register_exception_handlers(app: FastAPI) -> None:
    """Map failures onto ``{"error", "message"}`` JSON bodies."""

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Rejected invalid request to {request.url.path}")
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body("validation_error", "Request validation failed", details=details),
        )

    @app.exception_handler(SQLAlchemyError)
    @app.exception_handler(KeyValueStoreError)
    async def on_storage_error(request: Request, exc: Exception) -> JSONResponse:
        # Backend details stay in the log
        logger.error(f"Storage failure serving {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("storage_error", "The shop storage is unavailable. Please retry shortly."),
        )

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unexpected failure serving {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("internal_error", "Something went wrong on our side."),
        )


def create_app(settings: Settings = None) -> FastAPI:
    """Application factory.

    Args:
        settings: Overrides the environment-derived settings

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    show_docs = settings.ENVIRONMENT != "production"
    application = FastAPI(
        title="SnackShop API",
        description="Storefront for AI-imagined snacks: generation, semantic search, cart",
        version=API_VERSION,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
    )
    application.state.settings = settings

    # Request IDs first so every later log line carries one
    application.add_middleware(RequestIDMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    register_exception_handlers(application)

    application.include_router(observability_router)
    application.include_router(shop_router, prefix="/api/v1")

    @application.get("/", include_in_schema=False)
    async def index() -> dict[str, Any]:
        return {
            "name": "SnackShop API",
            "version": API_VERSION,
            "docs": "/docs" if show_docs else None,
            "shop": "/api/v1/shop",
        }

    return application


app = create_app()


if __name__ == "__main__":
    import os
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "snackshop.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
