# 🚀 page_gateway/api/app.py
"""
🚀 FastAPI-застосунок шлюзу.

🔹 Lifespan створює контейнер, запускає браузер і гарантовано закриває ресурси.
🔹 Єдиний обробник перетворює `GatewayError` та непередбачені винятки на JSON.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import FastAPI, Request										# 🚀 Веб-фреймворк
from fastapi.responses import JSONResponse									# 📤 JSON-відповіді

# 🔠 Системні імпорти
import logging																# 🧾 Логування
from contextlib import asynccontextmanager									# 🤝 Lifespan
from typing import Any, AsyncIterator, Callable, Optional					# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.errors.reason_mapper import build_error_payload			# 🧭 Помилка → JSON
from page_gateway.shared.errors import GatewayError						# ⚠️ Доменні помилки
from page_gateway.shared.utils.logger import LOG_NAME						# 🏷️ Базове ім'я логера
from .routes import router, service_router

logger = logging.getLogger(f"{LOG_NAME}.app")

ContainerFactory = Callable[[], Any]


def _default_container() -> Any:
    from page_gateway.config import ConfigService, Container				# 🧭 Локальний імпорт проти циклів

    return Container(ConfigService())


def create_app(container_factory: Optional[ContainerFactory] = None) -> FastAPI:
    """
    🏗️ Створює застосунок.

    Args:
        container_factory: Фабрика контейнера (тести підставляють фейк).
    """
    factory = container_factory or _default_container

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        container = factory()
        app.state.container = container
        await container.startup()
        logger.info("✅ Шлюз готовий приймати запити")
        try:
            yield
        finally:
            await container.shutdown()
            logger.info("🔒 Шлюз зупинено")

    app = FastAPI(
        title="Page Gateway",
        description="Resolves and retrieves manga page images with a headless-browser fallback",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(service_router)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        level = logging.INFO if exc.http_status < 500 else logging.WARNING
        logger.log(level, "⚠️ %s %s → %s", request.method, request.url.path, exc, extra=exc.to_log_extra())
        status, body = build_error_payload(exc)
        return JSONResponse(status_code=status, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("🔥 Необроблений виняток на %s: %s", request.url.path, exc, exc_info=exc)
        status, body = build_error_payload(exc)
        return JSONResponse(status_code=status, content=body)

    return app


__all__ = ["create_app"]
