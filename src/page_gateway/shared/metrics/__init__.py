# 📊 page_gateway/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus для шлюзу.

🔹 Лічильники шляху отримання сторінок (direct/render) та збоїв.
🔹 Лічильники запитів до API метаданих.
"""

from __future__ import annotations

from .retrieval import (
    ARTIFACTS_REMOVED,
    PAGES_FAILED,
    PAGES_SERVED,
    RENDER_FALLBACKS,
    UPSTREAM_REQUESTS,
    safe_inc,
)

__all__ = [
    "ARTIFACTS_REMOVED",
    "PAGES_FAILED",
    "PAGES_SERVED",
    "RENDER_FALLBACKS",
    "UPSTREAM_REQUESTS",
    "safe_inc",
]
