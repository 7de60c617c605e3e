"""Root logger configuration for the desktop client.

File handler logs at the configured level (``LOG_LEVEL``, default DEBUG);
the console only shows warnings and errors.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

from .configuration import LoggingConfig

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(config: LoggingConfig, base_dir: Optional[Path] = None) -> Optional[Path]:
    """Install file and console handlers on the root logger.

    Args:
        config: Logging section of the system configuration
        base_dir: Directory relative log paths are resolved against

    Returns:
        Path of the log file, or None when file logging is disabled
    """
    file_level = LOG_LEVEL_MAP.get(config.level.upper(), logging.DEBUG)
    console_level = LOG_LEVEL_MAP.get(config.console_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    log_file_path: Optional[Path] = None
    if config.log_file:
        log_file_path = Path(config.log_file)
        if not log_file_path.is_absolute():
            log_file_path = (base_dir or Path.cwd()) / log_file_path
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    if os.name == 'nt':
        # Proactor loop shutdown noise
        logging.getLogger("asyncio").setLevel(logging.CRITICAL)

    logging.getLogger(__name__).info(
        f"Logging configured: file={log_file_path}, console={logging.getLevelName(console_level)}+"
    )
    return log_file_path
