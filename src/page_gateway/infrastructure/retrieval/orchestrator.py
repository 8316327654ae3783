# 🧭 page_gateway/infrastructure/retrieval/orchestrator.py
"""
🧭 RetrievalOrchestrator: автомат отримання однієї сторінки.

Locating → Selecting → DirectFetching → {Served | RenderFallingBack} → {Served | Failed}

🔹 Рівно одна спроба на кожному шляху, без ретраїв та backoff.
🔹 Результат: тегований `Served` | `Failed`, а не винятки.
🔹 Тимчасовий артефакт рендеру видаляється безумовно, навіть при скасуванні.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Скасування запитів
import logging															# 🧾 Логування переходів
from typing import Dict, Optional										# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import (								# 🧱 Доменні DTO та контракти
    Failed,
    IDirectFetcher,
    IPageLocator,
    IRenderFallback,
    PageRequest,
    QualitySelector,
    ResolvedPageURL,
    RetrievalOutcome,
    RetrievalPath,
    RetrievalState,
    Served,
    TransientArtifact,
)
from page_gateway.shared.errors import (								# ⚠️ Доменні помилки
    GatewayError,
    RenderError,
    TransportError,
)
from page_gateway.shared.metrics import (								# 📈 Метрики шляху
    ARTIFACTS_REMOVED,
    PAGES_FAILED,
    PAGES_SERVED,
    RENDER_FALLBACKS,
    safe_inc,
)
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.retrieval")


class RetrievalOrchestrator:
    """🧭 Компонує локатор, селектор, пряме завантаження та рендер-фолбек."""

    def __init__(
        self,
        locator: IPageLocator,
        fetcher: IDirectFetcher,
        renderer: IRenderFallback,
        *,
        selector: Optional[QualitySelector] = None,
    ) -> None:
        self._locator = locator
        self._fetcher = fetcher
        self._renderer = renderer
        self._selector = selector or QualitySelector()

    async def retrieve(self, request: PageRequest) -> RetrievalOutcome:
        """
        📨 Проводить запит через автомат і повертає термінальний стан.

        `asyncio.CancelledError` не перетворюється на `Failed`: скасування
        пробрасується далі після прибирання артефакту.
        """
        extra = request.log_extra()

        # --- Locating ---
        self._transition(RetrievalState.LOCATING, extra)
        try:
            manifest = await self._locator.locate(request.chapter_id)
        except GatewayError as exc:
            return self._fail(exc, RetrievalState.LOCATING, extra)

        # --- Selecting ---
        self._transition(RetrievalState.SELECTING, extra)
        try:
            resolved = self._selector.select(manifest, request.tier, request.page_index)
        except GatewayError as exc:
            return self._fail(exc, RetrievalState.SELECTING, extra)

        extra = {**extra, "url": resolved.url, "used_tier": resolved.tier.value}

        # --- DirectFetching ---
        self._transition(RetrievalState.DIRECT_FETCHING, extra)
        try:
            image = await self._fetcher.fetch(resolved.url)
        except TransportError as exc:
            logger.info("↪️ Пряме завантаження впало (%s), переходимо на рендер-фолбек", exc, extra=extra)
        else:
            return self._served(image.content, image.content_type, RetrievalPath.DIRECT, resolved.url, extra)

        # --- RenderFallingBack ---
        return await self._render_fallback(request, resolved, extra)

    # ================================
    # 🖼️ РЕНДЕР-ФОЛБЕК
    # ================================
    async def _render_fallback(
        self,
        request: PageRequest,
        resolved: ResolvedPageURL,
        extra: Dict[str, object],
    ) -> RetrievalOutcome:
        self._transition(RetrievalState.RENDER_FALLING_BACK, extra)
        safe_inc(RENDER_FALLBACKS)

        artifact: Optional[TransientArtifact] = None
        try:
            try:
                artifact = await self._renderer.capture(
                    resolved.url,
                    chapter_id=request.chapter_id,
                    page_index=request.page_index,
                )
            except GatewayError as exc:
                return self._fail(exc, RetrievalState.RENDER_FALLING_BACK, extra)
            except asyncio.CancelledError:
                raise
            except Exception as exc:									# noqa: BLE001
                logger.exception("💥 Непередбачений збій рендеру", extra=extra)
                return self._fail(
                    RenderError(details=f"{type(exc).__name__}: {exc}", stage="unexpected"),
                    RetrievalState.RENDER_FALLING_BACK,
                    extra,
                )

            return self._served(artifact.content, artifact.content_type, RetrievalPath.RENDER, resolved.url, extra)
        finally:
            if artifact is not None:
                self._cleanup(artifact, extra)

    # ================================
    # 🧰 ДОПОМІЖНІ МЕТОДИ
    # ================================
    @staticmethod
    def _transition(state: RetrievalState, extra: Dict[str, object]) -> None:
        logger.debug("🧭 → %s", state.value, extra={**extra, "state": state.value})

    @staticmethod
    def _served(
        content: bytes,
        content_type: str,
        path: RetrievalPath,
        source_url: str,
        extra: Dict[str, object],
    ) -> Served:
        safe_inc(PAGES_SERVED, path=path.value)
        logger.info(
            "✅ Сторінку віддано (%s, %d байт, %s)",
            path.value,
            len(content),
            content_type,
            extra={**extra, "state": RetrievalState.SERVED.value, "path": path.value},
        )
        return Served(content=content, content_type=content_type, path=path, source_url=source_url)

    @staticmethod
    def _fail(error: GatewayError, during: RetrievalState, extra: Dict[str, object]) -> Failed:
        safe_inc(PAGES_FAILED, reason=error.reason.value)
        logger.warning(
            "❌ Запит сторінки завершився помилкою на етапі %s: %s",
            during.value,
            error,
            extra={**extra, **error.to_log_extra(), "state": RetrievalState.FAILED.value},
        )
        return Failed(error=error, failed_during=during)

    @staticmethod
    def _cleanup(artifact: TransientArtifact, extra: Dict[str, object]) -> None:
        try:
            removed = artifact.remove()
        except OSError:
            logger.exception("⚠️ Не вдалося видалити артефакт %s", artifact.path, extra=extra)
            return
        if removed:
            safe_inc(ARTIFACTS_REMOVED)
            logger.debug("🧹 Артефакт видалено: %s", artifact.path, extra=extra)


__all__ = ["RetrievalOrchestrator"]
