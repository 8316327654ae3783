"""
🧪 test_gateway_logger.py: єдина схема логування

Перевіряє:
- Консоль + файл із ротацією
- Відсутність дублювання хендлерів
- JSON-формат з extra-полями
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler

from page_gateway.shared.utils.logger import LOG_NAME, JsonFormatter, init_logging, init_logging_from_config


def test_init_logging_adds_console_and_file(tmp_path):
    log_file = tmp_path / "logs" / "gateway.log"

    logger = init_logging(level="DEBUG", file=str(log_file))

    assert logger.name == LOG_NAME
    handler_types = {type(h) for h in logger.handlers}
    assert logging.StreamHandler in handler_types
    assert TimedRotatingFileHandler in handler_types
    assert log_file.parent.exists()


def test_repeated_init_does_not_duplicate_handlers(tmp_path):
    init_logging(file=str(tmp_path / "a.log"))
    count_before = len(logging.getLogger(LOG_NAME).handlers)

    init_logging(file=str(tmp_path / "a.log"))

    assert len(logging.getLogger(LOG_NAME).handlers) == count_before


def test_file_can_be_disabled_from_config():
    logger = init_logging_from_config({"level": "WARNING", "file_enabled": False, "suppress": {"uvicorn.access": "ERROR"}})

    assert not any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers)
    assert logging.getLogger("uvicorn.access").level == logging.ERROR
    assert logging.getLogger("httpx").level == logging.WARNING


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(LOG_NAME, logging.INFO, __file__, 10, "served %s", ("page",), None)
    record.chapter_id = "ch-1"
    record.path = object()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "served page"
    assert payload["chapter_id"] == "ch-1"
    assert isinstance(payload["path"], str)
