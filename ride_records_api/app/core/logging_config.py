"""
Logging configuration for the ride service.

``setup_logging`` is called by ``create_app`` and may run more than once
per process (tests build many apps).  Each call applies the requested
level; handlers are identified by name so repeated calls never stack
duplicates.  Uvicorn's loggers and the request access log are routed
through the root logger so every line shares one format, which is why
``run.py`` starts uvicorn with ``log_config=None``.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "ride_records_api.console"
FILE_HANDLER = "ride_records_api.file"

ACCESS_LOGGER = "ride_records_api.access"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _find_handler(logger: logging.Logger, name: str) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == name:
            return handler
    return None


def _add_file_handler(root: logging.Logger, logfile: str, formatter: logging.Formatter) -> None:
    log_path = Path(logfile).resolve()
    current = _find_handler(root, FILE_HANDLER)
    if current is not None:
        if getattr(current, "baseFilename", None) == str(log_path):
            return
        root.removeHandler(current)
        current.close()
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.set_name(FILE_HANDLER)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger, the access log and uvicorn's loggers.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.  Applied on
        every call.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.  Calling again with another path moves the
        file handler.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Someone else (pytest, an embedding app) already owns console output.
    if not root.handlers:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile:
        _add_file_handler(root, logfile, formatter)

    access_logger = logging.getLogger(ACCESS_LOGGER)
    access_logger.setLevel(numeric_level)
    access_logger.propagate = True

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        for handler in list(server_logger.handlers):
            server_logger.removeHandler(handler)
        server_logger.setLevel(logging.NOTSET)
        server_logger.propagate = True
