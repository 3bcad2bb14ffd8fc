"""ConnectionProvider: DB 接続の供給元."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlbind._validate import require_not_none

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionStatus:
    """接続取得の結果. 成功時は connection、失敗時は error が設定される."""

    connection: Any = None
    error: BaseException | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None and self.connection is not None

    def unwrap(self) -> Any:
        """接続を返す. 失敗していた場合はその例外を送出する."""
        if self.error is not None:
            raise self.error
        return self.connection


@runtime_checkable
class ConnectionProvider(Protocol):
    """DB 接続の供給元."""

    def get_connection(self) -> ConnectionStatus:
        """DB 接続を取得する. 例外は送出せず ConnectionStatus.error に格納する."""
        ...


class SimpleConnectionProvider:
    """呼び出しのたびに新しい接続を開く ConnectionProvider.

    Examples:
        >>> provider = SimpleConnectionProvider(sqlite3.connect, "app.db")
        >>> conn = provider.get_connection().unwrap()

    """

    def __init__(self, connect: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """初期化.

        Args:
            connect: DB-API の connect 関数（例: sqlite3.connect, psycopg.connect）
            *args: connect に渡す位置引数
            **kwargs: connect に渡すキーワード引数

        """
        self._connect = require_not_none(connect, "connect")
        self._args = args
        self._kwargs = dict(kwargs)

    def get_connection(self) -> ConnectionStatus:
        try:
            connection = self._connect(*self._args, **self._kwargs)
        except Exception as e:
            logger.warning("Failed to open connection: %s", type(e).__name__)
            return ConnectionStatus(error=e)
        return ConnectionStatus(connection=connection)


class _UncloseableConnection:
    """close() を無視し、それ以外は元の接続に委譲するラッパー.

    with ブロックは元の接続の __exit__ を呼ばず、成功時にコミット、例外時に
    ロールバックするだけで接続は閉じない（psycopg の __exit__ は接続を閉じる）。
    """

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def __getattr__(self, name: str) -> Any:
        return getattr(self._connection, name)

    def __enter__(self) -> Any:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self._connection.commit()
        else:
            self._connection.rollback()

    def close(self) -> None:
        """何もしない."""


class StaticConnectionProvider:
    """常に同じ接続を返す ConnectionProvider.

    返す接続の close() は何もしないため、セッションはプロバイダの生存期間中
    開いたままになる。スレッドセーフではない。テストや短時間の利用向け。
    """

    def __init__(self, connection: Any) -> None:
        self._connection = _UncloseableConnection(require_not_none(connection, "connection"))

    def get_connection(self) -> ConnectionStatus:
        return ConnectionStatus(connection=self._connection)
