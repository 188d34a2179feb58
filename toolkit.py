"""
小ツール共通の「I/Oまわり」部品集（toolkit）

dirlist 本体からは「設定の読み込み」と「ログの出し先」だけをここに寄せる。
ツール固有の環境変数名や config のキー名は dirlist.py 側で持つ。
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

_TRUE_WORDS = {"1", "true", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "no", "n", "off"}

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def parse_provided_options(argv: list[str] | None) -> set[str]:
    """CLIで明示された `--option` の集合を返す（`--x=1` は `--x` として数える）。"""
    if not argv:
        return set()
    return {token.split("=", 1)[0] for token in argv if token.startswith("--")}


def parse_bool(value: str) -> bool | None:
    """
    env / .env 由来の文字列を bool にする。

    true: 1, true, yes, y, on
    false: 0, false, no, n, off
    どちらでもない値は None（呼び出し側で「無視して警告」する）。
    """
    v = value.strip().lower()
    if v in _TRUE_WORDS:
        return True
    if v in _FALSE_WORDS:
        return False
    return None


def _split_env_line(row: str) -> tuple[str, str] | None:
    """.env の1行を (key, value) にする。読めない行は None。"""
    line = row.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export ") :].lstrip()
    key, sep, val = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    val = val.strip()
    if len(val) >= 2 and val[0] == val[-1] and val[0] in {'"', "'"}:
        val = val[1:-1]
    return key, val


def load_env_file(path: Path, logger: logging.Logger) -> dict[str, str]:
    """
    .env 形式（KEY=VALUE）を読む。

    - 空行 / `#` コメントは無視
    - `export KEY=VALUE` を許容
    - 値の前後のクォートは剥がす
    - 読めなかったら logger.error を出して空の dict を返す（本処理は止めない）
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("env file load failed: %s (%s)", path, exc)
        return {}

    env: dict[str, str] = {}
    for row in text.splitlines():
        pair = _split_env_line(row)
        if pair is not None:
            env[pair[0]] = pair[1]
    return env


def get_env(name: str, env_file: dict[str, str]) -> str | None:
    # --env-file を明示したときは .env が OS 環境変数に勝つ
    for source in (env_file, os.environ):
        v = source.get(name)
        if v:
            return v
    return None


def setup_logger(name: str, verbose: bool) -> logging.Logger:
    """
    stderr 向けの logger を組み立てる。

    stdout は一覧の出力専用なので、進捗や失敗はすべて stderr に寄せる。
    何度呼んでも handler は1つだけになる（設定解決の途中で作り直すため）。
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    logger.propagate = False

    logger.handlers.clear()

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
