"""Утилиты для настройки логирования приложения."""
from __future__ import annotations

import logging
import os
from pathlib import Path


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Настроить логирование в консоль и, если задан путь, в файл.

    Пустое значение SPANLIGHT_LOG_FILE отключает запись в файл.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = (level or os.getenv("SPANLIGHT_LOG_LEVEL", "INFO")).upper()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_target = log_file if log_file is not None else os.getenv("SPANLIGHT_LOG_FILE", "spanlight.log")
    if log_target:
        log_path = Path(log_target)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
