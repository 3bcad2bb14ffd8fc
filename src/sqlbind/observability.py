"""ステートメントのログ出力設定とバインド値の記録."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from sqlbind._validate import require_not_none
from sqlbind.sql_type import SqlType

__all__ = (
    "NULL_STRING",
    "LoggingConfig",
    "StatementLogger",
    "StatementValue",
    "default_statement_logger",
    "format_values",
)

logger = logging.getLogger("sqlbind.statement")

NULL_STRING = "NULL"
"""None の値・型を表すログ上の文字列."""


class StatementLogger(Protocol):
    """ステートメントのログ出力先."""

    def __call__(
        self,
        operation: str,
        statement: str,
        values: list[str],
        stack_trace: traceback.StackSummary | None,
    ) -> None:
        """ログ情報を受け取る.

        Args:
            operation: 操作名（例: "execute()", "add_batch() #0"）
            statement: 名前付きプレースホルダを含む元の SQL
            values: "name [TYPE]: value" 形式の文字列（ソート済み）
            stack_trace: 呼び出し元のスタック（add_stacktrace が False なら None）

        """
        ...


@dataclass(frozen=True)
class StatementValue:
    """ログ用に記録したバインド値."""

    parameter_name: str
    sql_type: SqlType | None
    value: str

    def format(self) -> str:
        """"name [TYPE]: value" 形式の文字列を返す."""
        type_name = NULL_STRING if self.sql_type is None else self.sql_type.type_name
        return f"{self.parameter_name} [{type_name}]: {self.value}"


def format_values(values: Iterable[StatementValue]) -> list[str]:
    """バインド値をログ用の文字列リストに変換する（ソート済み）."""
    return sorted(value.format() for value in values)


def default_statement_logger(
    operation: str,
    statement: str,
    values: list[str],
    stack_trace: traceback.StackSummary | None,
) -> None:
    """標準 logging の "sqlbind.statement" ロガーへ DEBUG で出力する."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    message = f"{operation}\nSQL: {statement}\nValues: {values}"
    if stack_trace is not None:
        message = f"{message}\nStack:\n{''.join(stack_trace.format())}"
    logger.debug(message)


def _never() -> bool:
    return False


def _always() -> bool:
    return True


@dataclass(frozen=True)
class LoggingConfig:
    """ステートメントのログ設定.

    アプリケーション起動時に1つ生成し、全てのステートメントに渡して共有する。
    ``log_check`` はほぼ全ての操作で呼ばれるため軽量であること。

    Examples:
        >>> config = LoggingConfig.enabled(add_stacktrace=True)
        >>> stmt = prepare_statement(conn, sql, logging_config=config)

    """

    logger: StatementLogger | None = None
    log_check: Callable[[], bool] = field(default=_never)
    add_stacktrace: bool = False

    @classmethod
    def enabled(
        cls,
        logger: StatementLogger | None = None,
        log_check: Callable[[], bool] | None = None,
        *,
        add_stacktrace: bool = False,
    ) -> LoggingConfig:
        """ログを有効にした設定を生成する.

        Args:
            logger: ログ出力先（省略時は default_statement_logger）
            log_check: ログを取るか判定する関数（省略時は常に True）
            add_stacktrace: スタックトレースを付加するか

        """
        return cls(
            logger=logger if logger is not None else default_statement_logger,
            log_check=log_check if log_check is not None else _always,
            add_stacktrace=add_stacktrace,
        )

    def __post_init__(self) -> None:
        require_not_none(self.log_check, "log_check")

    def is_enabled(self) -> bool:
        """この呼び出しでログを取るか."""
        return self.logger is not None and self.log_check()

    def log(self, operation: str, statement: str, values: Iterable[StatementValue]) -> None:
        """ログ出力先へ渡す. 呼び出し側で is_enabled() を確認済みであること."""
        if self.logger is None:
            return
        stack_trace = None
        if self.add_stacktrace:
            # log() 自身と呼び出し元のステートメントメソッドを除く
            stack_trace = traceback.StackSummary.from_list(traceback.extract_stack()[:-2])
        self.logger(operation, statement, format_values(values), stack_trace)
