"""
Logging utilities

Библиотека пишет в логгеры с префиксом "positive_decimal" и по умолчанию
ничего не выводит (NullHandler). Приложение подключает вывод через
setup_logger.
"""

import logging
import sys

LOGGER_NAME = "positive_decimal"

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Настройка stream-логгера со стандартным форматом.

    Повторный вызов не дублирует handlers.

    Args:
        name: Имя логгера (default: корневой логгер пакета)
        level: Уровень логирования

    Returns:
        Настроенный Logger
    """
    logger = logging.getLogger(name)

    if logger.hasHandlers():
        for handler in list(logger.handlers):
            if not isinstance(handler, logging.NullHandler):
                logger.removeHandler(handler)

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger
