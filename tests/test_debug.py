import pytest

from canisgl.config import get_config
from canisgl.debug import FatalError, error, fatal_error, log, warning


@pytest.fixture
def logging_on(monkeypatch):
    monkeypatch.setattr(get_config(), "log", True)


@pytest.fixture
def logging_off(monkeypatch):
    monkeypatch.setattr(get_config(), "log", False)


def test_log_prints_green(capsys, logging_on):
    log("hello")
    assert capsys.readouterr().out == "\033[1;32mLog: \033[0mhello\n"


def test_warning_prints_yellow(capsys, logging_on):
    warning("careful")
    assert capsys.readouterr().out == "\033[1;33mWarning: \033[0mcareful\n"


def test_error_prints_red(capsys, logging_on):
    error("broken")
    assert capsys.readouterr().out == "\033[1;31mError: \033[0mbroken\n"


@pytest.mark.parametrize("report", [log, warning, error])
def test_nothing_printed_when_logging_off(capsys, logging_off, report):
    report("quiet")
    assert capsys.readouterr().out == ""


def test_fatal_error_raises_and_prints(capsys, logging_on):
    with pytest.raises(FatalError, match="no window"):
        fatal_error("no window")
    assert capsys.readouterr().out == "\033[1;31mFatalError: \033[0mno window\n"


def test_fatal_error_raises_silently_when_logging_off(capsys, logging_off):
    with pytest.raises(FatalError):
        fatal_error("no context")
    assert capsys.readouterr().out == ""