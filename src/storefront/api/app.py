# 🚀 storefront/api/app.py
"""🚀 Фабрика FastAPI-застосунку та обробники помилок."""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# 🔠 Системні імпорти
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

# 🧩 Внутрішні модулі проєкту
from storefront import __version__
from storefront.config import ConfigService
from storefront.config.setup.container import Container
from storefront.errors import ErrorCode, StorefrontError
from storefront.shared.utils.logger import LOG_NAME

from .routes import router

logger = logging.getLogger(f"{LOG_NAME}.api")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Збирає застосунок; без контейнера будує його з `ConfigService()`."""
    container = container or Container(ConfigService())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await container.aclose()

    app = FastAPI(title="Creator Storefront", version=__version__, lifespan=lifespan)
    app.state.container = container
    app.include_router(router)

    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
        level = logging.ERROR if exc.http_status >= 500 else logging.INFO
        logger.log(level, "🚨 %s %s → %s %s", request.method, request.url.path, exc.http_status, exc.code, extra=exc.to_log_extra())
        return JSONResponse(status_code=exc.http_status, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("🚨 %s %s → 400 invalid body", request.method, request.url.path)
        first = exc.errors()[0] if exc.errors() else {}
        message = f"Invalid request: {'.'.join(str(p) for p in first.get('loc', ()))} {first.get('msg', '')}".strip()
        return JSONResponse(status_code=400, content={"error": message, "code": ErrorCode.VALIDATION})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    return app
