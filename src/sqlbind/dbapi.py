"""CursorStatement: DB-API 2.0 接続上の位置パラメータ形式ステートメント."""

from __future__ import annotations

import decimal
import logging
from typing import Any

from sqlbind._validate import require_not_blank, require_not_none
from sqlbind.exceptions import StatementError, UnboundParameterError
from sqlbind.sql_type import ParameterNullability, SqlType

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class CursorStatement:
    """DB-API 2.0 接続上の位置パラメータ形式ステートメント.

    位置パラメータの値を保持し、実行時に ``cursor.execute(sql, params)`` へ渡す。
    カーソルは生成時に1つ開き、close() まで使い回す。

    Examples:
        >>> stmt = CursorStatement(conn, "SELECT * FROM users WHERE id = ?", 1)
        >>> stmt.set_parameter(1, 42)
        >>> rows = stmt.execute_query().fetchall()

    """

    def __init__(
        self,
        connection: Any,
        sql: str,
        parameter_count: int,
        *,
        driver_sql: str | None = None,
    ) -> None:
        """初期化.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
            sql: 位置パラメータ形式の SQL
            parameter_count: 位置パラメータの数
            driver_sql: 実行時にドライバへ渡す SQL（省略時は sql）。
                format 形式のドライバ向けに % をエスケープした SQL を渡す

        """
        self._connection = require_not_none(connection, "connection")
        self._sql = require_not_blank(sql, "sql")
        self._driver_sql = self._sql if driver_sql is None else require_not_blank(driver_sql, "driver_sql")
        if parameter_count < 0:
            msg = f"parameter_count must not be negative: {parameter_count}"
            raise ValueError(msg)
        self._values: list[Any] = [_UNSET] * parameter_count
        self._types: list[SqlType | None] = [None] * parameter_count
        self._batch: list[tuple[Any, ...]] = []
        self._cursor = connection.cursor()
        self._closed = False

    @property
    def sql(self) -> str:
        """位置パラメータ形式の SQL."""
        return self._sql

    @property
    def driver_sql(self) -> str:
        """ドライバへ渡す SQL."""
        return self._driver_sql

    @property
    def connection(self) -> Any:
        """DB 接続オブジェクト."""
        return self._connection

    @property
    def cursor(self) -> Any:
        """内部のカーソル."""
        return self._cursor

    @property
    def parameter_count(self) -> int:
        return len(self._values)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    @property
    def lastrowid(self) -> Any:
        return getattr(self._cursor, "lastrowid", None)

    @property
    def description(self) -> Any:
        return self._cursor.description

    def _check_index(self, index: int) -> int:
        if not 1 <= index <= len(self._values):
            msg = f"Parameter index {index} out of range (1..{len(self._values)})"
            raise StatementError(msg)
        return index - 1

    def _check_open(self) -> None:
        if self._closed:
            msg = "Statement is closed"
            raise StatementError(msg)

    def set_parameter(self, index: int, value: Any, sql_type: SqlType | None = None) -> None:
        """位置パラメータに値を設定する.

        Args:
            index: 位置番号（1始まり）
            value: 値
            sql_type: 宣言する SQL 型（省略時は値から推定）

        """
        self._check_open()
        i = self._check_index(index)
        self._values[i] = value
        self._types[i] = sql_type

    def set_null(self, index: int, sql_type: SqlType) -> None:
        """位置パラメータに NULL を設定する."""
        self.set_parameter(index, None, require_not_none(sql_type, "sql_type"))

    def clear_parameters(self) -> None:
        """設定済みの値を全て消去する."""
        self._values = [_UNSET] * len(self._values)
        self._types = [None] * len(self._types)

    def _current_parameters(self) -> tuple[Any, ...]:
        for i, value in enumerate(self._values):
            if value is _UNSET:
                index = i + 1
                msg = f"Parameter #{index} is not bound"
                raise UnboundParameterError(msg, index)
        return tuple(self._values)

    def add_batch(self) -> None:
        """現在の値をバッチに追加する."""
        self._check_open()
        self._batch.append(self._current_parameters())

    def clear_batch(self) -> None:
        """バッチを破棄する."""
        self._batch.clear()

    def execute_batch(self) -> int:
        """バッチを executemany で実行し、影響行数を返す.

        実行後（失敗時も）バッチは空になる。
        """
        self._check_open()
        batch = self._batch
        self._batch = []
        if not batch:
            return 0
        self._cursor.executemany(self._driver_sql, batch)
        return self._cursor.rowcount

    def execute(self) -> bool:
        """SQL を実行する.

        Returns:
            結果セットがある場合 True

        """
        self._check_open()
        self._cursor.execute(self._driver_sql, self._current_parameters())
        return self._cursor.description is not None

    def execute_query(self) -> Any:
        """SELECT を実行し、結果を読み出せるカーソルを返す."""
        self.execute()
        return self._cursor

    def execute_update(self) -> int:
        """INSERT/UPDATE/DELETE を実行し、影響行数を返す."""
        self.execute()
        return self._cursor.rowcount

    def cancel(self) -> None:
        """実行中の操作を中断する（ドライバが対応している場合のみ）.

        sqlite3 は ``Connection.interrupt()``、psycopg は ``Connection.cancel()`` を使う。
        別スレッドから呼ぶことを想定した唯一のメソッド。
        """
        interrupt = getattr(self._connection, "interrupt", None)
        if interrupt is None:
            interrupt = getattr(self._connection, "cancel", None)
        if interrupt is None:
            logger.debug("Connection %r does not support cancel", type(self._connection).__name__)
            return
        interrupt()

    def close(self) -> None:
        """カーソルを閉じる. 二度目以降の呼び出しは何もしない."""
        if self._closed:
            return
        self._closed = True
        self._cursor.close()

    def parameter_metadata(self) -> BoundParameterMetaData:
        """位置パラメータのメタデータを返す."""
        return BoundParameterMetaData(list(self._values), list(self._types))


class BoundParameterMetaData:
    """設定済みの値と宣言型から導出した位置パラメータのメタデータ.

    DB-API 2.0 にはパラメータのメタデータ取得 API がないため、NULL 許容性は
    常に UNKNOWN。未設定の位置は型 NULL として扱う。
    """

    def __init__(self, values: list[Any], types: list[SqlType | None]) -> None:
        self._values = values
        self._types = types

    def _value(self, index: int) -> Any:
        if not 1 <= index <= len(self._values):
            msg = f"Parameter index {index} out of range (1..{len(self._values)})"
            raise StatementError(msg)
        value = self._values[index - 1]
        return None if value is _UNSET else value

    def get_parameter_count(self) -> int:
        return len(self._values)

    def get_parameter_type(self, index: int) -> SqlType:
        value = self._value(index)
        declared = self._types[index - 1]
        return declared if declared is not None else SqlType.from_value(value)

    def get_parameter_type_name(self, index: int) -> str:
        return self.get_parameter_type(index).type_name

    def get_parameter_class_name(self, index: int) -> str:
        value = self._value(index)
        cls = type(value)
        return f"{cls.__module__}.{cls.__qualname__}"

    def get_precision(self, index: int) -> int:
        value = self._value(index)
        if isinstance(value, decimal.Decimal) and value.is_finite():
            digits = value.as_tuple()
            return max(len(digits.digits), -int(digits.exponent))
        if isinstance(value, (str, bytes, bytearray)):
            return len(value)
        return 0

    def get_scale(self, index: int) -> int:
        value = self._value(index)
        if isinstance(value, decimal.Decimal) and value.is_finite():
            return max(0, -int(value.as_tuple().exponent))
        return 0

    def is_nullable(self, index: int) -> ParameterNullability:
        self._value(index)
        return ParameterNullability.UNKNOWN

    def is_signed(self, index: int) -> bool:
        value = self._value(index)
        return isinstance(value, (int, float, decimal.Decimal)) and not isinstance(value, bool)
