"""データベース関連ユーティリティ."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from sqlbind._validate import require_not_empty, require_not_none

logger = logging.getLogger(__name__)

_MULTIPLE_SPACES = re.compile(" {2,}")


@dataclass(frozen=True)
class ExecStatus:
    """execute() が失敗したときの結果."""

    command: str
    """失敗したコマンド（コミット時の失敗は "commit;"）."""

    error: Exception
    """発生した例外."""


def parse_sql_script(script: str) -> list[str]:
    """SQL スクリプトを単一のステートメントに分割する.

    - ``--`` 行コメントと ``/* */`` ブロックコメントを除去する
    - 各ステートメントを1行にまとめる（連続する空白は1つの空白になる）
    - 引用符（' と "）の中の ``;`` やコメント記号はそのまま残す
    - 各ステートメントは ``;`` で終わる（最後の1つは省略可）

    1文字遅れで出力するステートマシンとして実装している。``last`` は直前の文字で、
    現在の文字を見てから出力するかどうかを決める。

    Args:
        script: SQL スクリプト

    Returns:
        ステートメントのリスト（空のスクリプトなら空リスト）

    Raises:
        NullArgumentError: script が None の場合

    """
    require_not_none(script, "script")

    buffer: list[str] = []
    in_single = False
    in_double = False
    in_block = False
    in_line = False
    last = " "
    for ch in script:
        if not buffer and ch.isspace():
            continue

        in_comment = in_block or in_line
        in_string = in_single or in_double
        if ch == "-":
            if not in_comment:
                if in_string or last != "-":
                    buffer.append(last)
                else:
                    in_line = True
                    last = " "
                    continue
        elif ch == "\n":
            if in_block:
                continue
            if in_line:
                in_line = False
                last = " "
                continue
            if in_string:
                buffer.append(last)
                last = " "
                continue
            if last.isspace():
                continue
            if last != ";":
                buffer.append(last)
                last = " "
                continue
            buffer.append(";")
        elif ch in "'\"":
            if not in_comment:
                if ch == "'" and not in_double:
                    in_single = not in_single or last == "\\"
                elif ch == '"' and not in_single:
                    in_double = not in_double or last == "\\"
                buffer.append(last)
        elif ch == "/":
            if in_block:
                if last == "*":
                    in_block = False
                    last = " "
                    continue
            elif not in_line:
                buffer.append(last)
        elif ch == "*":
            if not in_comment:
                if not in_string and last == "/":
                    in_block = True
                    last = " "
                    continue
                buffer.append(last)
        elif not in_comment:
            if ch.isspace():
                if not last.isspace():
                    buffer.append(last)
                elif last == "\n":
                    # ; の後の改行を保留したまま読み飛ばす
                    continue
            elif in_string:
                buffer.append(last)
            elif ch == ";":
                buffer.append(last)
                buffer.append(";")
                last = "\n"
                continue
            else:
                buffer.append(last)
        last = ch

    # 最後の1文字（末尾に ; がない場合）
    if not (in_block or in_line) and not last.isspace():
        buffer.append(last)

    text = "".join(buffer[1:])
    statements = (_MULTIPLE_SPACES.sub(" ", line).strip() for line in text.split("\n"))
    return [statement for statement in statements if statement]


def execute(connection: Any, *commands: str) -> ExecStatus | None:
    """複数のコマンドを1つのカーソルで順に実行する.

    空白のみのコマンドは読み飛ばす。接続が autocommit でなければ最後にコミットし、
    失敗時はロールバックする。ドライバの例外（``connection.Error`` の派生）は送出せず
    ExecStatus として返す。それ以外の例外はそのまま送出する。
    ``connection.Error`` を持たない接続では全ての Exception をドライバの例外とみなす。

    Args:
        connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
        *commands: 実行するコマンド

    Returns:
        成功時は None、失敗時は失敗したコマンドと例外

    Raises:
        NullArgumentError: connection が None の場合

    """
    require_not_none(connection, "connection")
    driver_error = _driver_error(connection)
    autocommit = getattr(connection, "autocommit", False) is True
    current = ""
    try:
        cursor = connection.cursor()
        try:
            for command in commands:
                if not command or not command.strip():
                    continue
                current = command
                cursor.execute(command)
        finally:
            cursor.close()
        if not autocommit:
            current = "commit;"
            connection.commit()
    except driver_error as e:
        logger.debug("Command failed: %s", current)
        if not autocommit:
            try:
                connection.rollback()
            except driver_error as rollback_error:
                e.add_note(f"rollback failed: {rollback_error!r}")
        return ExecStatus(command=current, error=e)
    return None


def _driver_error(connection: Any) -> type[Exception]:
    error = getattr(connection, "Error", None)
    if isinstance(error, type) and issubclass(error, Exception):
        return error
    return Exception


def execute_script(connection: Any, script: str) -> ExecStatus | None:
    """SQL スクリプトを分割して execute() で実行する."""
    require_not_empty(script, "script")
    return execute(connection, *parse_sql_script(script))


def stream(cursor: Any) -> Iterator[dict[str, Any]]:
    """カーソルの残りの行を列名をキーとする辞書として1行ずつ返す.

    Args:
        cursor: 実行済みのカーソル

    Yields:
        列名 → 値の辞書

    """
    require_not_none(cursor, "cursor")
    if cursor.description is None:
        return
    columns = [desc[0] for desc in cursor.description]
    while True:
        row = cursor.fetchone()
        if row is None:
            return
        if isinstance(row, dict):
            yield dict(row)
        else:
            yield dict(zip(columns, row))
