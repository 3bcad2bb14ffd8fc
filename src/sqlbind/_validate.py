"""引数検証とエラーメッセージ生成."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlbind import config
from sqlbind.exceptions import (
    BlankArgumentError,
    EmptyArgumentError,
    NullArgumentError,
    UnknownParameterError,
)

T = TypeVar("T")

_MESSAGES = {
    "ja": {
        "null_argument": "引数 '{name}' が None です",
        "empty_argument": "引数 '{name}' が空です",
        "blank_argument": "引数 '{name}' が空白のみです",
        "unknown_parameter": "パラメータ名 '{name}' は存在しません",
    },
    "en": {
        "null_argument": "Argument '{name}' is None",
        "empty_argument": "Argument '{name}' is empty",
        "blank_argument": "Argument '{name}' is blank",
        "unknown_parameter": "Parameter name '{name}' unknown",
    },
}


def format_message(key: str, **kwargs: Any) -> str:
    """config.ERROR_MESSAGE_LANGUAGE に従ってメッセージを組み立てる."""
    lang = config.ERROR_MESSAGE_LANGUAGE
    template = _MESSAGES.get(lang, _MESSAGES["en"]).get(key, key)
    return template.format(**kwargs)


def require_not_none(value: T | None, name: str) -> T:
    """None でないことを検証する."""
    if value is None:
        raise NullArgumentError(format_message("null_argument", name=name), name)
    return value


def require_not_empty(value: Any, name: str) -> Any:
    """None でも空でもないことを検証する."""
    require_not_none(value, name)
    if len(value) == 0:
        raise EmptyArgumentError(format_message("empty_argument", name=name), name)
    return value


def require_not_blank(value: str | None, name: str) -> str:
    """None でも空でも空白のみでもないことを検証する."""
    text: str = require_not_empty(value, name)
    if not text.strip():
        raise BlankArgumentError(format_message("blank_argument", name=name), name)
    return text


def unknown_parameter_error(parameter_name: str, source_sql: str | None = None) -> UnknownParameterError:
    """未知のパラメータ名に対する例外を生成する."""
    msg = format_message("unknown_parameter", name=parameter_name)
    if config.ERROR_INCLUDE_SQL and source_sql:
        msg = f"{msg} sql='{source_sql.strip()}'"
    return UnknownParameterError(msg, parameter_name)
