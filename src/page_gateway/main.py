# 🚀 page_gateway/main.py
"""
🚀 Entry-point шлюзу сторінок.

🔹 Готує середовище (CLI-флаги → ENV), піднімає логування з конфігу.
🔹 Створює FastAPI-застосунок і запускає його через uvicorn.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import uvicorn															# 🦄 ASGI-сервер

# 🔠 Системні імпорти
import logging															# 🧾 Логування подій запуску
import os																# 🌍 Робота з ENV
import sys																# 🧵 CLI-аргументи
from typing import List, Optional										# 🧮 Анотації

# 🧩 Внутрішні модулі проєкту
from page_gateway.api import create_app									# 🚀 FastAPI-застосунок
from page_gateway.config import ConfigService							# ⚙️ Завантаження конфігів
from page_gateway.config.container import bootstrap_logging				# 🪵 Логування з YAML
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Ім'я кореневого логера

logger = logging.getLogger(LOG_NAME)


# ================================
# ⚙️ CLI-ФЛАГИ → ENV
# ================================
def _apply_cli_flags_to_env(args: List[str]) -> None:
    """
    Мапить зручні CLI-прапорці на ENV змінні шлюзу.
    """
    logger.debug("🧾 Обробляємо CLI-флаги: %s", args)

    def has_flag(flag: str) -> bool:
        return any(arg == flag for arg in args)

    def value(prefix: str) -> Optional[str]:
        for arg in args:
            if arg.startswith(prefix + "="):
                return arg.split("=", 1)[1]
        return None

    if has_flag("--headful"):
        os.environ["PAGE_GATEWAY_HEADLESS"] = "false"						# 👀 Видимий браузер
        logger.info("🖥️ Запускаємо у headful-режимі")

    host = value("--host")
    if host:
        os.environ["PAGE_GATEWAY_HOST"] = host

    port = value("--port")
    if port:
        if port.isdigit():
            os.environ["PAGE_GATEWAY_PORT"] = port
        else:
            logger.warning("⚠️ Ігноруємо некоректний --port=%s", port)

    level = value("--log-level")
    if level:
        os.environ["PAGE_GATEWAY_LOG_LEVEL"] = level.upper()


# ================================
# 🚀 ENTRYPOINT
# ================================
def main(argv: Optional[List[str]] = None) -> None:
    """
    Основна точка входу: флаги → ENV → конфіг → логування → uvicorn.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    _apply_cli_flags_to_env(args)

    ConfigService.reset()													# 🔁 Перечитуємо ENV після флагів
    config = ConfigService()
    bootstrap_logging(config)

    host = str(config.get("server.host", "0.0.0.0"))
    port = int(config.get("server.port", 8080, cast=int))

    logger.info("🚀 Page gateway стартує на %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_config=None)		# 🪵 Логування вже налаштоване
    logger.info("👋 Page gateway зупинено")


if __name__ == "__main__":
    main()
