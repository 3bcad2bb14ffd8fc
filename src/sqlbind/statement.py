"""EnhancedStatement: 名前付きパラメータでバインドできるステートメント."""

from __future__ import annotations

import datetime
import decimal
import logging
from collections.abc import Mapping
from types import MappingProxyType, TracebackType
from typing import IO, Any, Protocol

from sqlbind._validate import require_not_blank, require_not_none, unknown_parameter_error
from sqlbind.dbapi import CursorStatement
from sqlbind.metadata import ParameterMetaData, PositionalParameterMetaData
from sqlbind.observability import NULL_STRING, LoggingConfig, StatementValue
from sqlbind.parser.named import ParameterIndex, parse_named_sql, parse_sql
from sqlbind.sql_type import SqlType

logger = logging.getLogger(__name__)


class PositionalStatement(Protocol):
    """位置パラメータ形式のステートメント（下位のドライバ側オブジェクト）."""

    @property
    def sql(self) -> str: ...

    @property
    def connection(self) -> Any: ...

    @property
    def closed(self) -> bool: ...

    def set_parameter(self, index: int, value: Any, sql_type: SqlType | None = None) -> None: ...

    def set_null(self, index: int, sql_type: SqlType) -> None: ...

    def clear_parameters(self) -> None: ...

    def add_batch(self) -> None: ...

    def clear_batch(self) -> None: ...

    def execute_batch(self) -> int: ...

    def execute(self) -> bool: ...

    def execute_query(self) -> Any: ...

    def execute_update(self) -> int: ...

    def cancel(self) -> None: ...

    def close(self) -> None: ...

    def parameter_metadata(self) -> PositionalParameterMetaData: ...


class EnhancedStatement:
    """名前付きパラメータ（``:name``）でバインドできるステートメント.

    同じ名前が SQL 内に複数回現れても、値は一度の呼び出しで全ての位置に設定される。
    1つのインスタンスを複数スレッドから同時に使ってはならない（cancel() を除く）。

    Examples:
        >>> sql = "SELECT * FROM t WHERE a > :x AND b < :y AND c = :x"
        >>> with prepare_statement(connection, sql) as stmt:
        ...     stmt.set_int("x", 10)
        ...     stmt.set_int("y", 20)
        ...     rows = stmt.execute_query().fetchall()

        ログを有効にする:

        >>> config = LoggingConfig.enabled(add_stacktrace=True)
        >>> stmt = prepare_statement(connection, sql, logging_config=config)

    """

    def __init__(
        self,
        source_sql: str,
        statement: PositionalStatement,
        parameter_index: ParameterIndex,
        *,
        logging_config: LoggingConfig | None = None,
    ) -> None:
        """初期化.

        Args:
            source_sql: 名前付きプレースホルダを含む元の SQL
            statement: 書き換え後の SQL で準備した位置パラメータ形式のステートメント
            parameter_index: パラメータ名 → 位置番号
            logging_config: ログ設定（省略時はログなし）

        """
        self._source_sql = require_not_blank(source_sql, "source_sql")
        self._statement = require_not_none(statement, "statement")
        self._parameter_index: ParameterIndex = MappingProxyType(
            dict(require_not_none(parameter_index, "parameter_index"))
        )
        self._logging = logging_config if logging_config is not None else LoggingConfig()
        self._values: dict[str, StatementValue] = {}
        self._batch_counter = 0

    @classmethod
    def create(
        cls,
        connection: Any,
        sql: str,
        *,
        logging_config: LoggingConfig | None = None,
        placeholder: str = "?",
    ) -> EnhancedStatement:
        """DB-API 接続から EnhancedStatement を生成する.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
            sql: 名前付きプレースホルダを含む SQL
            logging_config: ログ設定
            placeholder: 位置パラメータの記号 ("?" または "%s")

        Raises:
            NullArgumentError: connection または sql が None の場合
            EmptyArgumentError: sql が空の場合
            BlankArgumentError: sql が空白のみの場合

        """
        require_not_none(connection, "connection")
        parsed = parse_named_sql(sql, placeholder=placeholder)
        driver_sql = None
        if placeholder == "%s":
            # format 形式のドライバは SQL 中の % を書式指定として解釈する
            driver_sql = parse_sql(sql, {}, placeholder=placeholder, escape_percent=True)
        statement = CursorStatement(connection, parsed.sql, parsed.parameter_count, driver_sql=driver_sql)
        return cls(
            parsed.source_sql,
            statement,
            parsed.parameter_index,
            logging_config=logging_config,
        )

    def __enter__(self) -> EnhancedStatement:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- 参照系 ---

    @property
    def source_sql(self) -> str:
        """名前付きプレースホルダを含む元の SQL."""
        return self._source_sql

    @property
    def sql(self) -> str:
        """位置パラメータ形式に書き換えた SQL."""
        return self._statement.sql

    @property
    def statement(self) -> PositionalStatement:
        """下位の位置パラメータ形式ステートメント."""
        return self._statement

    @property
    def connection(self) -> Any:
        return self._statement.connection

    @property
    def closed(self) -> bool:
        return self._statement.closed

    @property
    def logging_config(self) -> LoggingConfig:
        return self._logging

    @property
    def parameter_names(self) -> frozenset[str]:
        """パラメータ名の集合."""
        return frozenset(self._parameter_index)

    @property
    def parameter_index(self) -> Mapping[str, tuple[int, ...]]:
        return self._parameter_index

    def get_parameter_indexes(self, parameter_name: str) -> tuple[int, ...]:
        """パラメータ名に対応する位置番号を返す.

        Raises:
            UnknownParameterError: SQL に存在しない名前の場合

        """
        indexes = self._parameter_index.get(require_not_blank(parameter_name, "parameter_name"))
        if indexes is None:
            raise unknown_parameter_error(parameter_name, self._source_sql)
        return indexes

    def parameter_metadata(self) -> ParameterMetaData:
        """名前付きパラメータのメタデータを返す."""
        return ParameterMetaData(
            self._statement.parameter_metadata(),
            self.get_parameter_indexes,
            self.parameter_names,
        )

    def is_logging_enabled(self) -> bool:
        return self._logging.is_enabled()

    def current_values(self) -> list[StatementValue]:
        """ログ用に記録したバインド値（ログ無効時は空）."""
        return list(self._values.values())

    def _log(self, operation: str) -> None:
        if self._logging.is_enabled():
            self._logging.log(operation, self._source_sql, self._values.values())

    # --- バインド ---

    def _bind(self, parameter_name: str, value: Any, sql_type: SqlType | None, value_text: str | None = None) -> None:
        for index in self.get_parameter_indexes(parameter_name):
            self._statement.set_parameter(index, value, sql_type)
        if self._logging.is_enabled():
            log_type = sql_type if sql_type is not None else SqlType.from_value(value)
            if value_text is None:
                value_text = _describe(value, log_type)
            self._values[parameter_name] = StatementValue(parameter_name, log_type, value_text)

    def set_object(self, parameter_name: str, value: Any, sql_type: SqlType | None = None) -> None:
        """任意の値を設定する.

        Args:
            parameter_name: パラメータ名（コロンを含まない）
            value: 値
            sql_type: 宣言する SQL 型（省略時は値から推定）

        """
        self._bind(parameter_name, value, sql_type)

    def set_null(self, parameter_name: str, sql_type: SqlType) -> None:
        """NULL を設定する."""
        require_not_none(sql_type, "sql_type")
        for index in self.get_parameter_indexes(parameter_name):
            self._statement.set_null(index, sql_type)
        if self._logging.is_enabled():
            self._values[parameter_name] = StatementValue(parameter_name, sql_type, NULL_STRING)

    def set_string(self, parameter_name: str, value: str | None) -> None:
        self._bind(parameter_name, value, SqlType.VARCHAR)

    def set_int(self, parameter_name: str, value: int) -> None:
        self._bind(parameter_name, value, SqlType.INTEGER)

    def set_long(self, parameter_name: str, value: int) -> None:
        self._bind(parameter_name, value, SqlType.BIGINT)

    def set_float(self, parameter_name: str, value: float) -> None:
        self._bind(parameter_name, value, SqlType.DOUBLE)

    def set_decimal(self, parameter_name: str, value: decimal.Decimal | None) -> None:
        self._bind(parameter_name, value, SqlType.NUMERIC)

    def set_boolean(self, parameter_name: str, value: bool | None) -> None:
        value_text = NULL_STRING if value is None else ("true" if value else "false")
        self._bind(parameter_name, value, SqlType.BOOLEAN, value_text)

    def set_bytes(self, parameter_name: str, value: bytes | None) -> None:
        """バイト列を設定する. ログには型名と長さのみを出す."""
        value_text = NULL_STRING if value is None else f"{type(value).__name__} ({len(value)})"
        self._bind(parameter_name, value, SqlType.VARBINARY, value_text)

    def set_date(self, parameter_name: str, value: datetime.date | None) -> None:
        value_text = NULL_STRING if value is None else value.isoformat()
        self._bind(parameter_name, value, SqlType.DATE, value_text)

    def set_time(self, parameter_name: str, value: datetime.time | None) -> None:
        value_text = NULL_STRING if value is None else value.isoformat()
        self._bind(parameter_name, value, SqlType.TIME, value_text)

    def set_timestamp(self, parameter_name: str, value: datetime.datetime | None) -> None:
        if value is None:
            self._bind(parameter_name, None, SqlType.TIMESTAMP)
            return
        sql_type = SqlType.TIMESTAMP if value.tzinfo is None else SqlType.TIMESTAMP_WITH_TIMEZONE
        self._bind(parameter_name, value, sql_type, value.isoformat())

    def set_binary_stream(self, parameter_name: str, stream: IO[bytes] | None, length: int = -1) -> None:
        """バイナリストリームを読み出して設定する.

        ストリームは一度だけ読み、同じ内容を全ての位置に設定する。
        ログには型名と長さのみを出す。
        """
        self._bind_stream(parameter_name, stream, length, SqlType.LONGVARBINARY)

    def set_character_stream(self, parameter_name: str, stream: IO[str] | None, length: int = -1) -> None:
        """文字ストリームを読み出して設定する. ログには型名と長さのみを出す."""
        self._bind_stream(parameter_name, stream, length, SqlType.LONGVARCHAR)

    def _bind_stream(self, parameter_name: str, stream: IO[Any] | None, length: int, sql_type: SqlType) -> None:
        # 未知の名前ならストリームを消費しない
        self.get_parameter_indexes(parameter_name)
        if stream is None:
            self._bind(parameter_name, None, sql_type)
            return
        content = stream.read(length)
        self._bind(parameter_name, content, sql_type, f"{type(stream).__name__} ({len(content)})")

    def clear_parameters(self) -> None:
        """設定済みの値を全て消去する."""
        self._statement.clear_parameters()
        self._values.clear()

    # --- 実行 ---

    def execute(self) -> bool:
        """SQL を実行する. 結果セットがある場合 True."""
        self._log("execute()")
        return self._statement.execute()

    def execute_query(self) -> Any:
        """SELECT を実行し、結果を読み出せるカーソルを返す."""
        self._log("execute_query()")
        return self._statement.execute_query()

    def execute_update(self) -> int:
        """INSERT/UPDATE/DELETE を実行し、影響行数を返す."""
        self._log("execute_update()")
        return self._statement.execute_update()

    def add_batch(self) -> None:
        """現在の値をバッチに追加する."""
        self._log(f"add_batch() #{self._batch_counter}")
        self._statement.add_batch()
        self._batch_counter += 1

    def clear_batch(self) -> None:
        self._statement.clear_batch()
        self._batch_counter = 0

    def execute_batch(self) -> int:
        """バッチを実行し、影響行数を返す."""
        try:
            return self._statement.execute_batch()
        finally:
            self._batch_counter = 0

    def cancel(self) -> None:
        """実行中の操作を中断する. 別スレッドから呼んでよい唯一のメソッド."""
        self._statement.cancel()
        self._log("cancel()")

    def close(self) -> None:
        self._statement.close()


def prepare_statement(
    connection: Any,
    sql: str,
    *,
    logging_config: LoggingConfig | None = None,
    placeholder: str = "?",
) -> EnhancedStatement:
    """DB-API 接続から EnhancedStatement を生成する便利関数.

    Args:
        connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
        sql: 名前付きプレースホルダを含む SQL
        logging_config: ログ設定
        placeholder: 位置パラメータの記号 ("?" または "%s")

    Returns:
        EnhancedStatement

    """
    stmt = EnhancedStatement.create(connection, sql, logging_config=logging_config, placeholder=placeholder)
    logger.debug("Prepared statement with parameters %s", sorted(stmt.parameter_names))
    return stmt


def _describe(value: Any, sql_type: SqlType) -> str:
    """ログ用の値の文字列表現. バイナリと LOB は型名と長さのみ."""
    if value is None:
        return NULL_STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"{type(value).__name__} ({len(value)})"
    if sql_type.is_large_object:
        if isinstance(value, str):
            return f"{type(value).__name__} ({len(value)})"
        return type(value).__name__
    return str(value)
