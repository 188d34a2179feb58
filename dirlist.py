"""
dirlist: 固定ディレクトリ（/sandbox/t）のエントリを番号付きで一覧表示する小ツール

やること：
- /sandbox/t を開く（開けなければ stderr にエラーを出して終了コード1）
- エントリを1件ずつ読み、`File  1: name` の形で stdout に出す
- 読み終わったらディレクトリハンドルを閉じて終了コード0

対象パスは固定。CLI / env / config で変えられるのは「ログの詳しさ」だけ。
並び順は OS が返す順のまま（ソートしない）。
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

import toolkit

LOGGER_NAME = "dirlist"

TARGET_DIR = Path("/sandbox/t")


# -------------------------
# CLIパース（I/O境界：入力）
# -------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    CLI引数を定義して、解析結果（args）を返す。

    位置引数は持たない（対象ディレクトリは固定）。
    """
    parser = argparse.ArgumentParser(
        description=f"List the entries of {TARGET_DIR} with a running index.",
        allow_abbrev=False,  # 省略形 (--verb) は provided 判定から漏れるので受け付けない
    )

    parser.add_argument("--verbose", action="store_true", help="処理中の詳細ログを stderr に表示する")

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file path (e.g., config.json). CLI args override config.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from a .env file before processing (e.g., .env).",
    )

    return parser.parse_args(argv)


# -------------------------
# 設定ファイル（JSON） / env
# -------------------------


def load_config(path: Path, logger: logging.Logger) -> dict[str, Any]:
    """
    JSON設定ファイルを読み込む。

    期待する例：
      {"verbose": true}
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("config load failed: %s (%s)", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.error("config must be a JSON object: %s", path)
        return {}
    return data


def _coerce_bool(value: Any, source: str, logger: logging.Logger) -> bool | None:
    if isinstance(value, bool):
        return value
    parsed = toolkit.parse_bool(str(value))
    if parsed is None:
        logger.warning("ignored non-boolean value for %s: %r", source, value)
    return parsed


def apply_config(args: argparse.Namespace, cfg: dict[str, Any], provided: set[str], logger: logging.Logger) -> None:
    """configの値を args に反映する（CLIで明示された項目は上書きしない）。"""
    if "--verbose" not in provided and "verbose" in cfg:
        v = _coerce_bool(cfg["verbose"], "config verbose", logger)
        if v is not None:
            args.verbose = v

    logger.info("config applied (CLI overrides config)")


def apply_env(args: argparse.Namespace, env_file: dict[str, str], provided: set[str], logger: logging.Logger) -> None:
    """
    envの値を args に反映する（CLI > env > config）。

    対応する環境変数名：
      DIRLIST_VERBOSE

    DIRLIST_CONFIG は config を読む前に必要なので resolve_effective_args 側で解決する。
    """
    if "--verbose" not in provided:
        v = toolkit.get_env("DIRLIST_VERBOSE", env_file)
        if v is not None:
            parsed = _coerce_bool(v, "DIRLIST_VERBOSE", logger)
            if parsed is not None:
                args.verbose = parsed

    logger.info("env applied (CLI overrides env)")


def resolve_effective_args(argv: list[str] | None) -> tuple[argparse.Namespace, logging.Logger]:
    """
    CLI/env/config を統合して「最終的に使う args」と logger を確定する。

    config は最下位なので先に当て、その上から env を当てる。
    """
    # console script からは argv=None で呼ばれる。provided 判定のため実際の引数に揃える
    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    provided = toolkit.parse_provided_options(argv)

    # まずはCLIのverboseで暫定loggerを作る（env/configでverboseが変わったら作り直す）
    logger = toolkit.setup_logger(LOGGER_NAME, args.verbose)

    env_file: dict[str, str] = {}
    if args.env_file is not None:
        env_file = toolkit.load_env_file(args.env_file, logger)

    # configパスは env からも来るので、config を読む前に解決しておく
    if args.config is None and "--config" not in provided:
        v = toolkit.get_env("DIRLIST_CONFIG", env_file)
        if v:
            args.config = Path(v)

    if args.config is not None:
        cfg = load_config(args.config, logger)
        apply_config(args, cfg, provided, logger)

    apply_env(args, env_file, provided, logger)

    logger = toolkit.setup_logger(LOGGER_NAME, args.verbose)
    return args, logger


# -------------------------
# データモデル / エラー
# -------------------------


class DirectoryUnavailable(OSError):
    """対象ディレクトリを開けなかった（存在しない / ディレクトリでない / 権限がない）。"""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(reason)
        self.root = root
        self.reason = reason

    def __str__(self) -> str:
        return f"Unable to read directory: {self.reason}"


@dataclass(frozen=True)
class ListResult:
    """一覧表示の結果（対象パス + 表示した件数）。"""

    root: Path
    count: int


# -------------------------
# 一覧（コアロジック）
# -------------------------


def format_line(count: int, name: str) -> str:
    """1行ぶんの表示。番号は3桁幅で右寄せ（1000以上は幅が広がるだけで切らない）。"""
    return f"File {count:3d}: {name}"


def open_directory(root: Path) -> Any:
    """
    ディレクトリハンドル（os.scandir のイテレータ）を開く。

    失敗は DirectoryUnavailable に包んで投げる（元の OSError は __cause__ に残る）。
    返したハンドルは呼び出し側が with で閉じる。
    """
    try:
        return os.scandir(root)
    except OSError as exc:
        raise DirectoryUnavailable(root, exc.strerror or str(exc)) from exc


def write_line(stream: TextIO, line: str) -> None:
    """
    1行書いてすぐ flush する。

    エントリ名は UTF-8 とは限らない（surrogateescape で復号された名前が来る）。
    バイナリ層を持つ stream には os.fsencode で元のバイト列に戻して書く。
    StringIO などテキストだけの stream にはそのまま書く。
    """
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        print(line, file=stream, flush=True)
        return
    stream.flush()
    buffer.write(os.fsencode(line) + b"\n")
    buffer.flush()


def list_directory(root: Path, out: TextIO | None = None) -> ListResult:
    """
    root のエントリを1件ずつ out（既定は stdout）に書き出す。

    仕様として守りたいこと：
    - 開けなかったら何も書かずに DirectoryUnavailable
    - 件数カウンタ = 書き出した行数
    - ハンドルは with を抜けるときに必ず1回だけ閉じる（出力側の例外でも）
    - 並び替えない（OS が返した順のまま）
    """
    stream = out if out is not None else sys.stdout
    count = 0
    with open_directory(root) as handle:
        for entry in handle:
            count += 1
            write_line(stream, format_line(count, entry.name))
    return ListResult(root=root, count=count)


# -------------------------
# 実行入口
# -------------------------


def main(argv: list[str] | None = None) -> int:
    """
    実行入口（テストからも呼べる形）。

    終了コード：0 = 成功（空ディレクトリも含む）、1 = ディレクトリを開けなかった
    """
    _, logger = resolve_effective_args(argv)

    root = TARGET_DIR
    logger.info("list start: root=%s", root)
    try:
        result = list_directory(root)
    except DirectoryUnavailable as exc:
        logger.info("list failed: root=%s (%s)", exc.root, exc.reason)
        print(exc, file=sys.stderr)
        return 1

    logger.info("list done: root=%s count=%d", result.root, result.count)
    return 0
