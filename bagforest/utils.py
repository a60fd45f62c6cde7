import logging
import pathlib
from logging.handlers import RotatingFileHandler

from bagforest.const import (
    BF_LOGGING_BACKUP_COUNT,
    BF_LOGGING_FORMAT,
    BF_LOGGING_LOG_LEVEL,
    BF_LOGGING_MAX_BYTES,
    BF_LOGGING_ROOT,
)


def configure_logging(level: int = BF_LOGGING_LOG_LEVEL, log_path: pathlib.Path | str | None = None) -> logging.Logger:
    """
    Configures the package root logger that every bagforest logger propagates to.

    The console handler is attached once; each distinct `log_path` gets one rotating file handler,
    so calling this again with a new level or an extra file is safe.

    :param int level: The logging level, defaults to BF_LOGGING_LOG_LEVEL
    :param pathlib.Path | str | None log_path: Optional file to also log to, defaults to None
    :return logging.Logger: The package root logger
    """
    root = logging.getLogger(BF_LOGGING_ROOT)
    root.setLevel(level)
    formatter = logging.Formatter(BF_LOGGING_FORMAT)

    # RotatingFileHandler subclasses StreamHandler, so match the console handler exactly
    if not any(type(handler) is logging.StreamHandler for handler in root.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if log_path is not None:
        log_path = pathlib.Path(log_path).resolve()
        attached = {
            pathlib.Path(handler.baseFilename)
            for handler in root.handlers if isinstance(handler, RotatingFileHandler)
        }
        if log_path not in attached:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            rot_file_handler = RotatingFileHandler(
                log_path,
                maxBytes=BF_LOGGING_MAX_BYTES,
                backupCount=BF_LOGGING_BACKUP_COUNT,
            )
            rot_file_handler.setFormatter(formatter)
            root.addHandler(rot_file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Returns `name` as a child of the package root logger, configuring the root on first use."""
    root = logging.getLogger(BF_LOGGING_ROOT)
    if not root.handlers:
        configure_logging()

    if name == BF_LOGGING_ROOT or name.startswith(f"{BF_LOGGING_ROOT}."):
        return logging.getLogger(name)
    return root.getChild(name)
