"""SqlType enum: 汎用 SQL 型と パラメータの NULL 許容性."""

from __future__ import annotations

import datetime
import decimal
from enum import Enum, IntEnum
from typing import Any


class SqlType(Enum):
    """汎用 SQL 型.

    値は ``(型名, ベンダー型番号)``。型番号は JDBC の ``java.sql.Types`` と同じ値を使う。
    """

    ARRAY = ("ARRAY", 2003)
    BIGINT = ("BIGINT", -5)
    BINARY = ("BINARY", -2)
    BLOB = ("BLOB", 2004)
    BOOLEAN = ("BOOLEAN", 16)
    CHAR = ("CHAR", 1)
    CLOB = ("CLOB", 2005)
    DATE = ("DATE", 91)
    DECIMAL = ("DECIMAL", 3)
    DOUBLE = ("DOUBLE", 8)
    FLOAT = ("FLOAT", 6)
    INTEGER = ("INTEGER", 4)
    LONGNVARCHAR = ("LONGNVARCHAR", -16)
    LONGVARBINARY = ("LONGVARBINARY", -4)
    LONGVARCHAR = ("LONGVARCHAR", -1)
    NCHAR = ("NCHAR", -15)
    NCLOB = ("NCLOB", 2011)
    NULL = ("NULL", 0)
    NUMERIC = ("NUMERIC", 2)
    NVARCHAR = ("NVARCHAR", -9)
    OTHER = ("OTHER", 1111)
    REAL = ("REAL", 7)
    SMALLINT = ("SMALLINT", 5)
    TIME = ("TIME", 92)
    TIMESTAMP = ("TIMESTAMP", 93)
    TIMESTAMP_WITH_TIMEZONE = ("TIMESTAMP_WITH_TIMEZONE", 2014)
    TINYINT = ("TINYINT", -6)
    VARBINARY = ("VARBINARY", -3)
    VARCHAR = ("VARCHAR", 12)

    def __init__(self, type_name: str, vendor_type_number: int) -> None:
        self._type_name = type_name
        self._vendor_type_number = vendor_type_number

    @property
    def type_name(self) -> str:
        """型名を返す."""
        return self._type_name

    @property
    def vendor_type_number(self) -> int:
        """ベンダー型番号を返す."""
        return self._vendor_type_number

    @property
    def is_large_object(self) -> bool:
        """ログに内容を出さない大きな型（ストリーム・LOB）か."""
        match self:
            case (
                SqlType.BLOB
                | SqlType.CLOB
                | SqlType.NCLOB
                | SqlType.LONGVARBINARY
                | SqlType.LONGVARCHAR
                | SqlType.LONGNVARCHAR
            ):
                return True
            case _:
                return False

    @classmethod
    def value_of(cls, vendor_type_number: int) -> SqlType:
        """ベンダー型番号から SqlType を得る.

        Raises:
            ValueError: 対応する型がない場合

        """
        for member in cls:
            if member.vendor_type_number == vendor_type_number:
                return member
        msg = f"Unknown vendor type number: {vendor_type_number}"
        raise ValueError(msg)

    @classmethod
    def from_value(cls, value: Any) -> SqlType:
        """Python の値から SQL 型を推定する.

        bool は int より先に判定する。datetime は date のサブクラスなので
        date より先に判定する。
        """
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.BIGINT
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, decimal.Decimal):
            return cls.NUMERIC
        if isinstance(value, str):
            return cls.VARCHAR
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls.VARBINARY
        if isinstance(value, datetime.datetime):
            if value.tzinfo is not None:
                return cls.TIMESTAMP_WITH_TIMEZONE
            return cls.TIMESTAMP
        if isinstance(value, datetime.date):
            return cls.DATE
        if isinstance(value, datetime.time):
            return cls.TIME
        if isinstance(value, (list, tuple)):
            return cls.ARRAY
        return cls.OTHER


class ParameterNullability(IntEnum):
    """パラメータの NULL 許容性（JDBC の parameterNoNulls 等と同じ値）."""

    NO_NULLS = 0
    NULLABLE = 1
    UNKNOWN = 2
