import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from estoque.core.config import settings
from estoque.core.database import SessionLocal, init_db
from estoque.core.error_handlers import (
    app_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from estoque.core.exceptions import AppException
from estoque.core.logging import setup_logging
from estoque.middleware.request_logging import request_logging_middleware
from estoque.routes.auth import router as auth_router
from estoque.routes.categories import router as categories_router
from estoque.routes.dashboard import router as dashboard_router
from estoque.routes.health import router as health_router
from estoque.routes.movements import router as movements_router
from estoque.routes.products import router as products_router
from estoque.services.seed import seed_demo

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Only seed in development or when explicitly requested
    if settings.env == "dev" or settings.seed_demo:
        with SessionLocal() as db:
            seed_demo(db)
    logger.info("Estoque API started (env=%s)", settings.env)
    yield
    logger.info("Estoque API stopped")


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Estoque API", version="0.1.0", lifespan=lifespan)

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.middleware("http")(request_logging_middleware)

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(categories_router, prefix="/categories", tags=["categories"])
    app.include_router(products_router, prefix="/products", tags=["products"])
    app.include_router(movements_router, prefix="/movements", tags=["movements"])

    return app


app = create_app()
