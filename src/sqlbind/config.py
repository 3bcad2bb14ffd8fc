"""sqlbind のモジュールレベル設定.

値は呼び出し時に参照されるため、起動時に一度だけ書き換えて使う::

    from sqlbind import config

    config.ERROR_MESSAGE_LANGUAGE = "ja"
"""

from __future__ import annotations

ERROR_MESSAGE_LANGUAGE: str = "en"
"""エラーメッセージの言語 ("en" または "ja")."""

ERROR_INCLUDE_SQL: bool = False
"""パラメータ名エラーのメッセージに元の SQL を含めるか."""
