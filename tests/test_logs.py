import logging
import re

from sibridge.logs import LOGGER_NAME, TRACE, StdLogWriter, init_logger, set_log_level


def test_set_log_level_known_names():
    assert set_log_level("DEBUG") == logging.DEBUG
    assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
    assert set_log_level("warn") == logging.WARNING
    assert set_log_level("trace") == TRACE
    assert set_log_level("panic") == logging.CRITICAL
    assert set_log_level("fatal") == logging.CRITICAL
    assert set_log_level("error") == logging.ERROR


def test_set_log_level_unknown_defaults_to_info():
    assert set_log_level("verbose") == logging.INFO
    assert logging.getLogger(LOGGER_NAME).level == logging.INFO


def test_init_logger_format(capsys):
    logger = init_logger("info")
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    logger.info("hello world")
    line = capsys.readouterr().err
    assert re.fullmatch(
        r"\[info\]: \d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - hello world\n", line
    ) is not None


def test_init_logger_does_not_stack_handlers(capsys):
    init_logger("info")
    logger = init_logger("info")
    logger.info("once")
    assert capsys.readouterr().err.count("once") == 1


def test_init_logger_respects_level(capsys):
    logger = init_logger("error")
    assert logger.level == logging.ERROR
    logger.info("hidden")
    assert capsys.readouterr().err == ""


def test_writer_strips_timestamp_and_newline(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    written = StdLogWriter().write(b"2022/01/02 03:04:05 hello\n")
    assert written == len("hello")
    assert caplog.records[-1].getMessage() == "[gousb] hello"


def test_writer_keeps_plain_text(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    StdLogWriter().write("plain message")
    assert caplog.records[-1].getMessage() == "[gousb] plain message"
    assert caplog.records[-1].levelno == logging.INFO