"""名前付きプレースホルダ（:name）の字句解析."""

from __future__ import annotations

import re
from dataclasses import dataclass

# プレースホルダパターン
#   コロン以外の1文字 + ':' + 英字 + 英数字*
#   先頭の1文字はマッチに含まれるが名前には含まれない（置換時に捨てられる）。
#
# 例:
#   "key = :key"      -> " :key" にマッチ、名前は "key"
#   "x::int"          -> マッチしない（'::' は型キャスト）
#   "f(:a :b)"        -> "(:a" と " :b" の2つ
#   ":a :b"           -> " :b" のみ（先頭の :a の前に文字がない）
#   "(:a:b)"          -> "(:a" のみ（':b' の前の 'a' は既に消費済み）
VARIABLE_PATTERN = r"[^:]:([a-zA-Z][a-zA-Z0-9]*)"

_VARIABLE_RE = re.compile(VARIABLE_PATTERN)


@dataclass(frozen=True)
class StatementVariable:
    """SQL 内の名前付きプレースホルダの出現."""

    name: str
    """パラメータ名（コロンを含まない）."""

    position: int
    """置換後の位置パラメータ番号（1始まり）."""

    start: int
    """元文字列内の開始位置（先行文字を含む）."""

    end: int
    """元文字列内の終了位置."""


def tokenize(sql: str) -> list[StatementVariable]:
    """SQL からプレースホルダの出現を抽出する.

    左から右へ一度だけ走査する。position は名前の重複に関係なく
    出現順に 1 から振られる。

    Args:
        sql: SQL 文字列

    Returns:
        StatementVariable のリスト（出現順）

    """
    return [
        StatementVariable(name=m.group(1), position=position, start=m.start(), end=m.end())
        for position, m in enumerate(_VARIABLE_RE.finditer(sql), start=1)
    ]
