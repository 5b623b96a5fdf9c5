"""Unit tests for the logging setup."""

import logging

import pytest

from ride_records_api.app.core.logging_config import (
    ACCESS_LOGGER,
    CONSOLE_HANDLER,
    FILE_HANDLER,
    SERVER_LOGGERS,
    setup_logging,
)


@pytest.fixture
def root_logger():
    """Hand out the root logger and put its state back afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    watched = [logging.getLogger(name) for name in (ACCESS_LOGGER,) + SERVER_LOGGERS]
    saved_loggers = [(lg, list(lg.handlers), lg.level, lg.propagate) for lg in watched]
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    for lg, handlers, level, propagate in saved_loggers:
        lg.handlers = handlers
        lg.setLevel(level)
        lg.propagate = propagate


def _named(root, name):
    return [handler for handler in root.handlers if handler.get_name() == name]


class TestSetupLogging:

    def test_level_applied_when_handlers_exist(self, root_logger):
        root_logger.addHandler(logging.NullHandler())

        setup_logging("DEBUG")

        assert root_logger.level == logging.DEBUG
        assert logging.getLogger(ACCESS_LOGGER).level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty")

        assert root_logger.level == logging.INFO

    def test_console_handler_added_once(self, root_logger):
        root_logger.handlers = []

        setup_logging("INFO")
        setup_logging("WARNING")

        assert len(_named(root_logger, CONSOLE_HANDLER)) == 1
        assert root_logger.level == logging.WARNING

    def test_existing_handlers_keep_console_output(self, root_logger):
        root_logger.addHandler(logging.NullHandler())

        setup_logging("INFO")

        assert _named(root_logger, CONSOLE_HANDLER) == []

    def test_file_handler_added_once(self, root_logger, tmp_path):
        logfile = tmp_path / "rides.log"

        setup_logging("INFO", str(logfile))
        setup_logging("INFO", str(logfile))
        logging.getLogger("ride_records_api.tests").warning("disk almost full")

        assert len(_named(root_logger, FILE_HANDLER)) == 1
        for handler in _named(root_logger, FILE_HANDLER):
            handler.flush()
        assert "[WARNING] ride_records_api.tests: disk almost full" in logfile.read_text(encoding="utf-8")

    def test_file_handler_moves_to_new_path(self, root_logger, tmp_path):
        setup_logging("INFO", str(tmp_path / "first.log"))
        setup_logging("INFO", str(tmp_path / "second.log"))

        handlers = _named(root_logger, FILE_HANDLER)

        assert len(handlers) == 1
        assert handlers[0].baseFilename == str((tmp_path / "second.log").resolve())

    def test_server_loggers_propagate_to_root(self, root_logger):
        server_error = logging.getLogger("uvicorn.error")
        server_error.addHandler(logging.NullHandler())
        server_error.propagate = False
        server_error.setLevel(logging.ERROR)

        setup_logging("INFO")

        for name in SERVER_LOGGERS:
            server_logger = logging.getLogger(name)
            assert server_logger.handlers == []
            assert server_logger.propagate is True
            assert server_logger.level == logging.NOTSET

    def test_access_log_reaches_root(self, root_logger, caplog):
        setup_logging("INFO")

        with caplog.at_level(logging.INFO):
            logging.getLogger(ACCESS_LOGGER).info("GET /rides 200")

        assert any(record.name == ACCESS_LOGGER for record in caplog.records)
