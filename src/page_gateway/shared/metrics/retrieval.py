# 📈 page_gateway/shared/metrics/retrieval.py
"""
📈 Лічильники Prometheus для шляху отримання сторінок та метаданих.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter									# 📈 Лічильники Prometheus

# 🔠 Системні імпорти
import logging															# 🧾 Логування збоїв метрик

# 🧩 Внутрішні модулі проєкту
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.metrics")


PAGES_SERVED = Counter(
    "gateway_pages_served_total",
    "Сторінки, успішно віддані клієнту, за шляхом отримання",
    ["path"],															# 🛤️ direct | render
)
PAGES_FAILED = Counter(
    "gateway_pages_failed_total",
    "Невдалі запити сторінок за причиною",
    ["reason"],
)
RENDER_FALLBACKS = Counter(
    "gateway_render_fallbacks_total",
    "Скільки разів пряме завантаження поступилося рендер-фолбеку",
)
ARTIFACTS_REMOVED = Counter(
    "gateway_transient_artifacts_removed_total",
    "Прибрані тимчасові файли рендеру",
)
UPSTREAM_REQUESTS = Counter(
    "gateway_upstream_requests_total",
    "Запити до API метаданих за ендпоінтом та результатом",
    ["endpoint", "outcome"],
)


def safe_inc(counter: Counter, **labels: str) -> None:
    """🔢 Інкрементує лічильник; збій метрик не ламає запит."""
    try:
        target = counter.labels(**labels) if labels else counter
        target.inc()
    except Exception:													# noqa: BLE001
        logger.debug("⚠️ Неможливо інкрементувати метрику %s", labels, exc_info=True)


__all__ = [
    "ARTIFACTS_REMOVED",
    "PAGES_FAILED",
    "PAGES_SERVED",
    "RENDER_FALLBACKS",
    "UPSTREAM_REQUESTS",
    "safe_inc",
]
