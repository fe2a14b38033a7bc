"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from millpane import MillpaneError, cli, config


@pytest.fixture(autouse=True)
def isolated_files(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / "config.toml")
    monkeypatch.setattr(cli, "CRASH_LOG_FILE", tmp_path / "crash.txt")


def test_validate_directory_accepts_directory(tmp_path):
    assert cli.validate_directory(tmp_path, "start") == tmp_path.resolve()


def test_validate_directory_missing_falls_back(tmp_path, capsys):
    result = cli.validate_directory(tmp_path / "missing", "start")
    assert result == Path.cwd()
    assert "does not exist" in capsys.readouterr().err


def test_validate_directory_file_falls_back(tmp_path, capsys):
    path = tmp_path / "file.txt"
    path.write_text("x")
    assert cli.validate_directory(path, "start") == Path.cwd()
    assert "not a directory" in capsys.readouterr().err


def test_parse_args_directory():
    assert cli.parse_args(["/srv"]).directory == "/srv"
    assert cli.parse_args([]).directory is None


def test_write_crash_log(tmp_path, capsys):
    try:
        raise RuntimeError("kaboom")
    except RuntimeError as err:
        cli.write_crash_log(err)
    text = (tmp_path / "crash.txt").read_text()
    assert "millpane Crash Report" in text
    assert "RuntimeError" in text
    assert "kaboom" in text
    assert "crashed unexpectedly" in capsys.readouterr().err


@patch("sys.stdout.isatty", return_value=True)
@patch("millpane.cli.ColumnBrowser")
def test_main_saves_final_directory(mock_browser, mock_isatty, tmp_path, capsys):
    mock_browser.return_value.browse.return_value = tmp_path
    assert cli.main([str(tmp_path)]) == 0
    assert config.get_last_directory() == str(tmp_path)
    assert f"Final directory: {tmp_path}" in capsys.readouterr().out
    start = mock_browser.call_args.args[0]
    assert start == tmp_path.resolve()


@patch("sys.stdout.isatty", return_value=True)
@patch("millpane.cli.ColumnBrowser")
def test_main_uses_saved_session(mock_browser, mock_isatty, tmp_path):
    config.save_last_directory(str(tmp_path))
    mock_browser.return_value.browse.return_value = tmp_path
    cli.main([])
    assert mock_browser.call_args.args[0] == tmp_path.resolve()


@patch("sys.stdout.isatty", return_value=True)
@patch("millpane.cli.ColumnBrowser")
def test_main_reports_startup_error(mock_browser, mock_isatty, tmp_path, capsys):
    mock_browser.return_value.browse.side_effect = MillpaneError("no curses")
    assert cli.main([str(tmp_path)]) == 1
    assert "Could not start browser: no curses" in capsys.readouterr().err


@patch("sys.stdout.isatty", return_value=True)
@patch("millpane.cli.ColumnBrowser")
def test_main_keyboard_interrupt(mock_browser, mock_isatty, tmp_path):
    mock_browser.return_value.browse.side_effect = KeyboardInterrupt
    assert cli.main([str(tmp_path)]) == 130
    assert not (tmp_path / "crash.txt").exists()


@patch("sys.stdout.isatty", return_value=True)
@patch("millpane.cli.ColumnBrowser")
def test_main_unexpected_error_writes_crash_log(mock_browser, mock_isatty, tmp_path):
    mock_browser.return_value.browse.side_effect = ValueError("bad state")
    assert cli.main([str(tmp_path)]) == 1
    assert "bad state" in (tmp_path / "crash.txt").read_text()


@patch("sys.stdout.isatty", return_value=False)
def test_main_requires_tty(mock_isatty, capsys):
    assert cli.main([]) == 1
    assert "requires an interactive terminal" in capsys.readouterr().out
