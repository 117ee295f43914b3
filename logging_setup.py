from __future__ import annotations
import logging
import logging.config
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

FMT_PLAIN = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
FMT_COLOR = "%(log_color)s%(levelname)-8s%(reset)s | %(asctime)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path | str] = None,
    log_file_name: str = "sitemap.log",
    file_max_bytes: int = 5 * 1024 * 1024,  # 5MB
    file_backup_count: int = 3,
) -> None:
    """
    Configure the "sitemap" loggers:
    - colored console output
    - a rotating log file when log_dir is given
    - quiet urllib3 (used by requests)
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "color",
        },
    }
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "()": RotatingFileHandler,
            "level": "INFO",
            "filename": str(log_dir / log_file_name),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
            "formatter": "plain",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": FMT_PLAIN, "datefmt": DATEFMT},
            "color": {
                "()": "colorlog.ColoredFormatter",
                "format": FMT_COLOR,
                "datefmt": DATEFMT,
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": handlers,
        "loggers": {
            "sitemap": {
                "level": log_level,
                "handlers": list(handlers),
                "propagate": False,
            },
            "urllib3": {"level": "WARNING"},
        },
    })

    logging.getLogger("sitemap").debug("Logging configured")


def get_app_logger(name: str = "sitemap") -> logging.Logger:
    return logging.getLogger(name)
