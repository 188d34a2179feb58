"""
toolkit のテスト（.env / bool / logger）。
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import toolkit


def test_parse_provided_options_collects_long_flags_only() -> None:
    assert toolkit.parse_provided_options(None) == set()
    assert toolkit.parse_provided_options(["--verbose", "--config=c.json", "-x", "pos"]) == {"--verbose", "--config"}


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on ", "y"])
def test_parse_bool_truthy(raw: str) -> None:
    assert toolkit.parse_bool(raw) is True


@pytest.mark.parametrize("raw", ["0", "false", "No", "off", "n"])
def test_parse_bool_falsey(raw: str) -> None:
    assert toolkit.parse_bool(raw) is False


def test_parse_bool_unknown_is_none() -> None:
    assert toolkit.parse_bool("maybe") is None
    assert toolkit.parse_bool("") is None


def test_load_env_file_parses_key_value_and_ignores_comments(tmp_path: Path) -> None:
    # テスト意図：よくある .env の書き方で壊れずに値が取れる
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "# comment",
                "",
                "export DIRLIST_VERBOSE=1",
                "DIRLIST_CONFIG='cfg.json'",
                'QUOTED="a=b"',
                "NO_EQUAL_SIGN",
                "=no_key",
            ]
        ),
        encoding="utf-8",
    )
    logger = toolkit.setup_logger("test", False)

    env = toolkit.load_env_file(env_path, logger)

    assert env == {"DIRLIST_VERBOSE": "1", "DIRLIST_CONFIG": "cfg.json", "QUOTED": "a=b"}


def test_load_env_file_missing_logs_error_and_returns_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    logger = toolkit.setup_logger("test", False)

    env = toolkit.load_env_file(tmp_path / "nope.env", logger)

    assert env == {}
    assert "[ERROR] test: env file load failed" in capsys.readouterr().err


def test_get_env_prefers_env_file_over_os_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIRLIST_VERBOSE", "false")

    assert toolkit.get_env("DIRLIST_VERBOSE", {"DIRLIST_VERBOSE": "true"}) == "true"
    # .env 側が空なら OS 環境変数にフォールバック
    assert toolkit.get_env("DIRLIST_VERBOSE", {"DIRLIST_VERBOSE": ""}) == "false"


def test_get_env_missing_everywhere_is_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DIRLIST_NOT_SET", raising=False)
    assert toolkit.get_env("DIRLIST_NOT_SET", {}) is None


def test_setup_logger_replaces_handlers_and_sets_level() -> None:
    logger = toolkit.setup_logger("toolkit-test", False)
    logger = toolkit.setup_logger("toolkit-test", True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False
