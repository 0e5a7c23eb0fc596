import logging

import pytest

from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger, ColoredFormatter, CustomFormatter, setup_logging


def test_setup_logging_writes_to_stderr_and_file(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "info")
    logger = setup_logging()
    logger.info("hello %s", "world", color="cyan")
    logger.debug("hidden")
    for handler in logging.getLogger().handlers:
        handler.flush()

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello world" in captured.err
    assert "hidden" not in captured.err
    assert "hello world" in (tmp_path / "logs" / "estab.log").read_text(encoding="utf-8")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_colored_formatter_marks_errors():
    formatter = ColoredFormatter(tz_name="UTC", fmt="%(levelname)s %(message)s")
    record = logging.LogRecord("estab", logging.ERROR, __file__, 1, "failed: %s", ("x",), None)
    record.color = "red"
    line = formatter.format(record)
    assert line.startswith("\033[31m")
    assert "⛔ failed: x" in line


def test_color_logger_delegates():
    inner = logging.getLogger("estab.delegate")
    logger = ColorLogger(inner)
    logger.setLevel(logging.WARNING)
    assert inner.level == logging.WARNING


def test_helper_config_values(monkeypatch):
    config = HelperConfig(logger=logging.getLogger("estab.tests"))
    monkeypatch.setenv("ESTAB_TEST_NUM", "2.5")
    monkeypatch.setenv("ESTAB_TEST_FLAG", "yes")
    monkeypatch.setenv("ESTAB_TEST_LIST", " a  b ")
    monkeypatch.delenv("ESTAB_TEST_MISSING", raising=False)

    assert config.get_number_val("estab_test_num") == 2.5
    assert config.get_bool_val("ESTAB_TEST_FLAG") is True
    assert config.get_list_val("ESTAB_TEST_LIST") == ["a", "b"]
    assert config.get_list_val("ESTAB_TEST_MISSING", default=[]) == []
    assert config.get_string_val("ESTAB_TEST_MISSING", default="x") == "x"
    with pytest.raises(ValueError):
        config.get_string_val("ESTAB_TEST_MISSING")


def test_prefix_is_added_once_per_handler():
    plain = CustomFormatter(tz_name="UTC", fmt="%(message)s")
    colored = ColoredFormatter(tz_name="UTC", fmt="%(message)s")
    record = logging.LogRecord("estab", logging.ERROR, __file__, 1, "failed: %s", ("x",), None)
    assert colored.format(record) == "⛔ failed: x"
    assert plain.format(record) == "⛔ failed: x"
    assert record.getMessage() == "failed: x"
