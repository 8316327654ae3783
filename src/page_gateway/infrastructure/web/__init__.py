# 🌐 page_gateway/infrastructure/web/__init__.py
"""🌐 Рендер через браузер: спільна сесія та фолбек-знімок."""

from .browser_session import BrowserSession
from .render_fallback import RenderFallback

__all__ = ["BrowserSession", "RenderFallback"]
