"""
Настройка логирования
"""

import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_dir: Union[str, Path],
    log_file: str = "classroll.log",
    level: Union[int, str] = logging.INFO,
    max_bytes: int = 2_000_000,
    backups: int = 3,
) -> None:
    """Настроить логирование с ротацией"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / log_file

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [file_handler, stream_handler]
