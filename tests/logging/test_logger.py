import json
import logging

from cxfer.logging import (
    LogConfig,
    LogLevel,
    get_logger,
    log_application_event,
    log_runtime_call,
    log_transaction,
    setup_logging,
)
from cxfer.logging import logger as logger_module


def _fake_file_handler(*args, **kwargs):
    handler = logging.NullHandler()
    handler.setLevel(logging.DEBUG)
    return handler


def _fake_stream_handler(*args, **kwargs):
    handler = logging.NullHandler()
    handler.setLevel(logging.WARNING)
    return handler


def _patch_handlers(mocker, tmp_path):
    mocker.patch(
        "cxfer.logging.logger.get_log_file_path", return_value=tmp_path / "cxfer.log"
    )
    mocker.patch(
        "logging.handlers.TimedRotatingFileHandler", side_effect=_fake_file_handler
    )
    mocker.patch("logging.StreamHandler", side_effect=_fake_stream_handler)
    mocker.patch("cxfer.logging.logger.cleanup_old_logs")


def test_setup_logging_basic(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)

    setup_logging(LogConfig(), force_reconfigure=True)

    assert logging.getLogger("cxfer").handlers
    runtime_logger = logging.getLogger("cxfer.runtime")
    assert runtime_logger.handlers
    assert runtime_logger.propagate is False


def test_setup_logging_without_runtime_calls(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)

    setup_logging(LogConfig(log_runtime_calls=False), force_reconfigure=True)

    assert logging.getLogger("cxfer.runtime").handlers == []


def test_setup_logging_reads_user_level(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)
    mocker.patch("cxfer.logging.logger._read_user_log_level", return_value=LogLevel.DEBUG)

    setup_logging(force_reconfigure=True)

    assert logging.getLogger("cxfer").level == logging.DEBUG


def test_read_user_log_level(mocker, isolated_config_store):
    with open(isolated_config_store.settings_file, "w", encoding="utf-8") as f:
        json.dump({"log_level": "ERROR"}, f)

    assert logger_module._read_user_log_level() is LogLevel.ERROR


def test_get_logger_returns_same_instance(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)
    setup_logging(LogConfig(), force_reconfigure=True)

    assert get_logger("cxfer.test") is get_logger("cxfer.test")


def test_log_runtime_call_success(mocker):
    spy = mocker.spy(logging.getLogger("cxfer.runtime"), "debug")

    log_runtime_call("load", "A.itm", duration=0.1)

    spy.assert_called_once()
    extra = spy.call_args.kwargs["extra"]
    assert extra["runtime_outcome"] == "ok"


def test_log_runtime_call_error_logs_warning(mocker):
    spy = mocker.spy(logging.getLogger("cxfer.runtime"), "warning")

    log_runtime_call("save", "A.itm", error="disk full")

    spy.assert_called_once()
    extra = spy.call_args.kwargs["extra"]
    assert extra["runtime_outcome"] == "error"
    assert extra["runtime_error"] == "disk full"


def test_log_transaction(mocker):
    spy = mocker.spy(logging.getLogger("cxfer.transaction"), "debug")

    log_transaction("import item", {"file": "A.itm"})

    spy.assert_called_once()
    assert spy.call_args.kwargs["extra"]["transaction_details"] == {"file": "A.itm"}


def test_log_application_event_level(mocker):
    spy = mocker.spy(logging.getLogger("cxfer.app"), "warning")

    log_application_event("low disk", level="warning")

    spy.assert_called_once()
