# 🧰 page_gateway/shared/utils/__init__.py
"""🧰 Спільні утиліти шлюзу (логування)."""

from .logger import LOG_NAME, init_logging, init_logging_from_config

__all__ = ["LOG_NAME", "init_logging", "init_logging_from_config"]
