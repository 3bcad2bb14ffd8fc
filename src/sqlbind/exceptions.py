"""sqlbind 例外クラス."""

from __future__ import annotations


class SqlbindError(Exception):
    """sqlbind の基底例外."""


class InvalidArgumentError(SqlbindError, ValueError):
    """引数の検証エラー."""

    def __init__(self, message: str, argument_name: str) -> None:
        super().__init__(message)
        self.argument_name = argument_name


class NullArgumentError(InvalidArgumentError):
    """引数が None."""


class EmptyArgumentError(InvalidArgumentError):
    """引数が空."""


class BlankArgumentError(InvalidArgumentError):
    """引数が空白文字のみ."""


class StatementError(SqlbindError):
    """ステートメント操作のエラー."""


class UnknownParameterError(StatementError):
    """ステートメントに存在しないパラメータ名."""

    def __init__(self, message: str, parameter_name: str) -> None:
        super().__init__(message)
        self.parameter_name = parameter_name


class UnboundParameterError(StatementError):
    """値がバインドされていない位置パラメータ."""

    def __init__(self, message: str, index: int) -> None:
        super().__init__(message)
        self.index = index
