# 🧱 page_gateway/domain/pages/entities.py
"""
🧱 Доменні DTO шляху отримання сторінок.

🔹 `ChapterPageManifest`: хост доставки, хеш і два паралельні списки файлів.
🔹 `QualityTier`: standard / reduced із сегментом шляху ("data" / "data-saver").
🔹 `Served` | `Failed`: тегований результат автомата отримання.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass										# 🧱 DTO
from enum import Enum													# 🏷️ Перелічення
from pathlib import Path												# 📁 Шлях тимчасового артефакту
from typing import Dict, Optional, Sequence, Tuple, Union				# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.errors.reason_codes import ReasonCode					# 🧮 Коди причин
from page_gateway.shared.errors import GatewayError, InvalidPage		# ⚠️ Доменні помилки


# ================================
# 🪶 РІВЕНЬ ЯКОСТІ
# ================================
class QualityTier(str, Enum):
    """🪶 Рівень якості сторінки."""

    STANDARD = "standard"
    REDUCED = "reduced"

    @property
    def path_segment(self) -> str:
        """🛤️ Сегмент шляху на сервері доставки."""
        return "data-saver" if self is QualityTier.REDUCED else "data"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "QualityTier":
        """
        🔤 Розбирає значення з запиту.

        Приймає `standard`/`reduced` та аліаси сервера доставки `data`/`data-saver`.
        Порожнє значення → STANDARD, невідоме → InvalidPage.
        """
        if raw is None or not str(raw).strip():
            return cls.STANDARD
        key = str(raw).strip().lower()
        tier = _TIER_ALIASES.get(key)
        if tier is None:
            raise InvalidPage(f"Unknown quality tier: {raw}", details=f"accepted: {', '.join(sorted(_TIER_ALIASES))}")
        return tier


_TIER_ALIASES: Dict[str, QualityTier] = {
    "standard": QualityTier.STANDARD,
    "data": QualityTier.STANDARD,
    "reduced": QualityTier.REDUCED,
    "data-saver": QualityTier.REDUCED,
    "datasaver": QualityTier.REDUCED,
}


# ================================
# 📜 МАНІФЕСТ РОЗДІЛУ
# ================================
@dataclass(frozen=True, slots=True)
class ChapterPageManifest:
    """📜 Свіжо отриманий маніфест сторінок розділу (без кешування)."""

    delivery_base_url: str												# 🌐 Хост доставки (змінюється з часом)
    content_hash: str													# 🔐 Тимчасовий токен розділу
    standard_refs: Tuple[str, ...]										# 🖼️ Файли повної якості
    reduced_refs: Tuple[str, ...] = ()									# 🪶 Файли зниженої якості

    def __post_init__(self) -> None:
        # 🧊 Списки → кортежі, щоб маніфест залишався незмінним
        object.__setattr__(self, "standard_refs", tuple(self.standard_refs))
        object.__setattr__(self, "reduced_refs", tuple(self.reduced_refs))
        object.__setattr__(self, "delivery_base_url", self.delivery_base_url.rstrip("/"))

    @property
    def page_count(self) -> int:
        return len(self.standard_refs)

    def refs_for(self, tier: QualityTier) -> Sequence[str]:
        return self.reduced_refs if tier is QualityTier.REDUCED else self.standard_refs

    def to_dict(self) -> Dict[str, object]:
        """📦 Представлення для JSON-відповіді `/pages`."""
        return {
            "baseUrl": self.delivery_base_url,
            "chapter": {
                "hash": self.content_hash,
                "data": list(self.standard_refs),
                "dataSaver": list(self.reduced_refs),
            },
        }


# ================================
# 🔗 РОЗВ'ЯЗАНА АДРЕСА СТОРІНКИ
# ================================
@dataclass(frozen=True, slots=True)
class ResolvedPageURL:
    """🔗 Адреса конкретної сторінки та звідки вона взялася."""

    url: str															# 🌐 Повний URL зображення
    tier: QualityTier													# 🪶 Фактично використаний рівень
    page_index: int														# 🔢 Індекс сторінки
    reference: str														# 🧾 Ім'я файлу зі списку
    substituted: bool = False											# 🔁 Reduced → Standard підміна

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class PageRequest:
    """📨 Вхідний запит на отримання сторінки."""

    chapter_id: str
    page_index: int
    tier: QualityTier = QualityTier.STANDARD

    def log_extra(self) -> Dict[str, object]:
        return {"chapter_id": self.chapter_id, "page_index": self.page_index, "tier": self.tier.value}


# ================================
# 📦 БАЙТИ ТА АРТЕФАКТИ
# ================================
@dataclass(frozen=True, slots=True)
class FetchedImage:
    """📦 Результат прямого завантаження."""

    url: str
    content: bytes
    content_type: str


@dataclass(frozen=True, slots=True)
class TransientArtifact:
    """🧪 Тимчасовий файл рендеру; належить одному запиту і видаляється після нього."""

    path: Path
    content: bytes
    content_type: str = "image/png"

    def remove(self) -> bool:
        """🧹 Видаляє файл; True, якщо він існував."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True


# ================================
# 🔀 РЕЗУЛЬТАТ АВТОМАТА
# ================================
class RetrievalState(str, Enum):
    """🧭 Стани автомата отримання сторінки."""

    LOCATING = "locating"
    SELECTING = "selecting"
    DIRECT_FETCHING = "direct_fetching"
    RENDER_FALLING_BACK = "render_falling_back"
    SERVED = "served"
    FAILED = "failed"


class RetrievalPath(str, Enum):
    """🛤️ Яким шляхом байти дійшли до клієнта."""

    DIRECT = "direct"
    RENDER = "render"


@dataclass(frozen=True, slots=True)
class Served:
    """✅ Термінальний стан: байти зображення для клієнта."""

    content: bytes
    content_type: str
    path: RetrievalPath
    source_url: str = ""


@dataclass(frozen=True, slots=True)
class Failed:
    """❌ Термінальний стан: структурована помилка для клієнта."""

    error: GatewayError
    failed_during: Optional[RetrievalState] = None

    @property
    def reason(self) -> ReasonCode:
        return self.error.reason


RetrievalOutcome = Union[Served, Failed]								# 🔀 Тегований результат


__all__ = [
    "ChapterPageManifest",
    "Failed",
    "FetchedImage",
    "PageRequest",
    "QualityTier",
    "ResolvedPageURL",
    "RetrievalOutcome",
    "RetrievalPath",
    "RetrievalState",
    "Served",
    "TransientArtifact",
]
