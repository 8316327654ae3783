# 🪶 page_gateway/domain/pages/services.py
"""
🪶 QualitySelector: вибір списку файлів та побудова URL сторінки.

🔹 Чиста логіка без мережі: межі перевіряються до будь-якого запиту.
🔹 Reduced бере файл зі списку data-saver лише якщо він там є; інакше: standard.
🔹 Строгий режим замінює тиху підміну явною `QualityTierUnavailable`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування підмін

# 🧩 Внутрішні модулі проєкту
from page_gateway.shared.errors import InvalidPage, QualityTierUnavailable	# ⚠️ Помилки клієнта
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера
from .entities import ChapterPageManifest, QualityTier, ResolvedPageURL

logger = logging.getLogger(f"{LOG_NAME}.domain.quality")


class QualitySelector:
    """🪶 Обирає список за рівнем якості та валідує індекс сторінки."""

    def __init__(self, *, strict_reduced_tier: bool = False) -> None:
        self._strict = bool(strict_reduced_tier)						# 🚦 Заборонити підміну reduced → standard

    def select(self, manifest: ChapterPageManifest, tier: QualityTier, index: int) -> ResolvedPageURL:
        """
        🔗 Повертає URL сторінки або піднімає InvalidPage.

        Args:
            manifest: Свіжий маніфест розділу.
            tier: Запитаний рівень якості.
            index: Індекс сторінки (з нуля).
        """
        standard = manifest.standard_refs
        if index < 0 or index >= len(standard):							# 🚧 Межі за standard-списком
            raise InvalidPage(page_index=index, available=len(standard))

        reduced = manifest.reduced_refs
        if tier is QualityTier.REDUCED:
            if index < len(reduced):
                return self._build(manifest, QualityTier.REDUCED, index, reduced[index])
            if self._strict:
                raise QualityTierUnavailable(
                    "Reduced quality is unavailable for this page",
                    page_index=index,
                    available=len(reduced),
                )
            logger.warning(
                "🔁 Reduced-копії сторінки %s немає (reduced=%d): беремо standard",
                index,
                len(reduced),
                extra={"page_index": index, "reduced_len": len(reduced)},
            )
            return self._build(manifest, QualityTier.STANDARD, index, standard[index], substituted=True)

        return self._build(manifest, QualityTier.STANDARD, index, standard[index])

    @staticmethod
    def _build(
        manifest: ChapterPageManifest,
        tier: QualityTier,
        index: int,
        reference: str,
        *,
        substituted: bool = False,
    ) -> ResolvedPageURL:
        url = f"{manifest.delivery_base_url}/{tier.path_segment}/{manifest.content_hash}/{reference}"
        return ResolvedPageURL(url=url, tier=tier, page_index=index, reference=reference, substituted=substituted)


def select_page(manifest: ChapterPageManifest, tier: QualityTier, index: int) -> ResolvedPageURL:
    """🔗 Нестрога вибірка без стану."""
    return QualitySelector().select(manifest, tier, index)


__all__ = ["QualitySelector", "select_page"]
