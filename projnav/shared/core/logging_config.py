"""Root logger setup shared by the CLI and host applications."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from projnav.shared.core.configuration import LoggingConfig

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Configure the root logger from ``config`` and return it.

    File handler: everything at ``config.level`` into a rotating file (only
    when ``config.file`` is set). Console handler: ``config.console_level``
    and above.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if config.file:
        log_file_path = Path(config.file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, config.level))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, config.console_level))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(
        f"Logging configured: file={config.file or 'disabled'}, console={config.console_level}+"
    )
    return root_logger
