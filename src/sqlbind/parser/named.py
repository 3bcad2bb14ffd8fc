"""名前付きパラメータ SQL の書き換えとパラメータインデックス構築."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from sqlbind._validate import require_not_blank, require_not_empty, require_not_none
from sqlbind.parser.tokenizer import tokenize

logger = logging.getLogger(__name__)

ParameterIndex = Mapping[str, tuple[int, ...]]
"""パラメータ名 → 位置パラメータ番号のタプル（不変）."""


@dataclass(frozen=True)
class ParsedSQL:
    """パース結果."""

    sql: str
    """位置パラメータ形式に書き換えた SQL."""

    source_sql: str
    """元の SQL."""

    parameter_index: ParameterIndex = field(default_factory=lambda: MappingProxyType({}))
    """パラメータ名 → 位置パラメータ番号."""

    @property
    def parameter_count(self) -> int:
        """位置パラメータの総数."""
        return sum(len(indexes) for indexes in self.parameter_index.values())


def parse_sql(
    sql: str,
    index_buffer: MutableMapping[str, list[int]],
    *,
    placeholder: str = "?",
    escape_percent: bool = False,
) -> str:
    """名前付きプレースホルダを位置パラメータに置換する.

    各プレースホルダ（先行する1文字を含む）は ``" " + placeholder`` に置き換わり、
    その位置番号が ``index_buffer[name]`` に追加される。
    ``escape_percent`` を指定すると、プレースホルダ以外の ``%`` を ``%%`` にする
    （format 形式のドライバに渡す SQL 用）。

    Args:
        sql: 名前付きプレースホルダを含む SQL
        index_buffer: パラメータ名 → 位置番号リストを受け取るバッファ
        placeholder: 位置パラメータの記号 ("?" または "%s")
        escape_percent: プレースホルダ以外の % をエスケープするかどうか

    Returns:
        書き換え後の SQL

    Raises:
        NullArgumentError: index_buffer または sql が None の場合
        EmptyArgumentError: sql または placeholder が空の場合
        BlankArgumentError: sql が空白のみの場合

    Examples:
        >>> buffer = {}
        >>> parse_sql("SELECT * FROM t WHERE a > :x AND c = :x", buffer)
        'SELECT * FROM t WHERE a > ? AND c = ?'
        >>> buffer
        {'x': [1, 2]}

    """
    require_not_none(index_buffer, "index_buffer")
    require_not_blank(sql, "sql")
    require_not_empty(placeholder, "placeholder")

    replacement = f" {placeholder}"
    parts: list[str] = []
    pos = 0
    for variable in tokenize(sql):
        parts.append(_escape(sql[pos : variable.start], escape_percent))
        parts.append(replacement)
        index_buffer.setdefault(variable.name, []).append(variable.position)
        pos = variable.end
    parts.append(_escape(sql[pos:], escape_percent))
    return "".join(parts)


def _escape(text: str, escape_percent: bool) -> str:
    return text.replace("%", "%%") if escape_percent else text


def convert_index_buffer_to_parameter_index(
    index_buffer: Mapping[str, Sequence[int]],
) -> ParameterIndex:
    """インデックスバッファを不変のパラメータインデックスに変換する.

    キー集合と各キーの位置番号の順序・重複はそのまま保持する。

    Args:
        index_buffer: パラメータ名 → 位置番号リスト

    Returns:
        パラメータ名 → 位置番号タプルの読み取り専用マッピング

    Raises:
        NullArgumentError: index_buffer が None の場合

    """
    require_not_none(index_buffer, "index_buffer")
    return MappingProxyType({name: tuple(indexes) for name, indexes in index_buffer.items()})


def parse_named_sql(sql: str, *, placeholder: str = "?") -> ParsedSQL:
    """SQL を書き換え、パラメータインデックスと共に返す便利関数.

    Args:
        sql: 名前付きプレースホルダを含む SQL
        placeholder: 位置パラメータの記号 ("?" または "%s")

    Returns:
        パース結果

    """
    index_buffer: dict[str, list[int]] = {}
    rewritten = parse_sql(sql, index_buffer, placeholder=placeholder)
    parameter_index = convert_index_buffer_to_parameter_index(index_buffer)
    logger.debug("Parsed %d named parameter(s) from SQL: %s", len(parameter_index), sql)
    return ParsedSQL(sql=rewritten, source_sql=sql, parameter_index=parameter_index)
