"""
dirlist のエントリーポイント（薄いラッパー）

import しただけでは一覧が走らない。テストは dirlist.py を直接 import する。
"""

from __future__ import annotations

import sys

if __name__ == "__main__":
    from dirlist import main

    raise SystemExit(main(sys.argv[1:]))
