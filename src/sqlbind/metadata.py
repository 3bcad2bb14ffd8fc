"""名前付きパラメータのメタデータ."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from sqlbind.sql_type import ParameterNullability, SqlType


@runtime_checkable
class PositionalParameterMetaData(Protocol):
    """位置パラメータ（1始まり）のメタデータ."""

    def get_parameter_count(self) -> int: ...

    def get_parameter_type(self, index: int) -> SqlType: ...

    def get_parameter_type_name(self, index: int) -> str: ...

    def get_parameter_class_name(self, index: int) -> str: ...

    def get_precision(self, index: int) -> int: ...

    def get_scale(self, index: int) -> int: ...

    def is_nullable(self, index: int) -> ParameterNullability: ...

    def is_signed(self, index: int) -> bool: ...


class ParameterMetaData:
    """名前付きパラメータのメタデータ.

    1つの名前が複数の位置に現れる場合、型・精度・スケール等は先頭の位置から
    取得する（同じ名前の位置は同じ型を持つという前提で、検証はしない）。
    NULL 許容性だけは全ての位置を確認し、一致しなければ UNKNOWN を返す。
    """

    def __init__(
        self,
        metadata: PositionalParameterMetaData,
        parameter_indexes: Callable[[str], tuple[int, ...]],
        parameter_names: frozenset[str],
    ) -> None:
        """初期化.

        Args:
            metadata: 位置パラメータのメタデータ
            parameter_indexes: 名前から位置番号を引く関数（未知の名前では例外）
            parameter_names: パラメータ名の集合

        """
        self._metadata = metadata
        self._parameter_indexes = parameter_indexes
        self._parameter_names = parameter_names

    @property
    def parameter_count(self) -> int:
        """名前付きパラメータの数（重複を除く）."""
        return len(self._parameter_names)

    @property
    def parameter_names(self) -> frozenset[str]:
        """パラメータ名の集合."""
        return self._parameter_names

    def get_parameter_indexes(self, parameter_name: str) -> tuple[int, ...]:
        """パラメータ名に対応する位置番号を返す."""
        return self._parameter_indexes(parameter_name)

    def _first_index(self, parameter_name: str) -> int:
        return self._parameter_indexes(parameter_name)[0]

    def get_parameter_type(self, parameter_name: str) -> SqlType:
        """SQL 型を返す."""
        return self._metadata.get_parameter_type(self._first_index(parameter_name))

    def get_parameter_type_name(self, parameter_name: str) -> str:
        """データベース固有の型名を返す."""
        return self._metadata.get_parameter_type_name(self._first_index(parameter_name))

    def get_parameter_class_name(self, parameter_name: str) -> str:
        """値の Python クラス名を返す."""
        return self._metadata.get_parameter_class_name(self._first_index(parameter_name))

    def get_precision(self, parameter_name: str) -> int:
        """精度を返す."""
        return self._metadata.get_precision(self._first_index(parameter_name))

    def get_scale(self, parameter_name: str) -> int:
        """スケールを返す."""
        return self._metadata.get_scale(self._first_index(parameter_name))

    def is_signed(self, parameter_name: str) -> bool:
        """符号付きの数値か."""
        return self._metadata.is_signed(self._first_index(parameter_name))

    def is_nullable(self, parameter_name: str) -> ParameterNullability:
        """NULL 許容性を返す.

        全ての位置で一致しない場合は ParameterNullability.UNKNOWN。
        """
        indexes = self._parameter_indexes(parameter_name)
        result = self._metadata.is_nullable(indexes[0])
        for index in indexes[1:]:
            if result == ParameterNullability.UNKNOWN:
                break
            if self._metadata.is_nullable(index) != result:
                result = ParameterNullability.UNKNOWN
        return ParameterNullability(result)
