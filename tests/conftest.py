"""pytest 共通設定: DB テスト基盤."""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Generator
from typing import Any

import pytest

from sqlbind import config

# --- 接続 URL ---
POSTGRESQL_URL = os.environ.get(
    "SQLBIND_TEST_POSTGRESQL_URL",
    "host=localhost port=5432 dbname=sqlbind_test user=sqlbind password=sqlbind_test_pass",
)


def _can_connect_postgresql() -> bool:
    """PostgreSQL に接続可能か判定する."""
    try:
        import psycopg

        conn = psycopg.connect(POSTGRESQL_URL, connect_timeout=3)
        conn.close()
    except Exception:
        return False
    return True


# --- DB 接続可否キャッシュ ---
_pg_available: bool | None = None


def _is_pg_available() -> bool:
    global _pg_available
    if _pg_available is None:
        _pg_available = _can_connect_postgresql()
    return _pg_available


# --- マーカーによる自動スキップ ---
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """DB マーカー付きテストを接続不可時に自動スキップする."""
    for item in items:
        if "postgresql" in item.keywords and not _is_pg_available():
            item.add_marker(pytest.mark.skip(reason="PostgreSQL is not available"))


# --- 設定の復元 ---
@pytest.fixture(autouse=True)
def _restore_config() -> Generator[None, None, None]:
    """テスト中に書き換えたモジュール設定を元に戻す."""
    language = config.ERROR_MESSAGE_LANGUAGE
    include_sql = config.ERROR_INCLUDE_SQL
    yield
    config.ERROR_MESSAGE_LANGUAGE = language
    config.ERROR_INCLUDE_SQL = include_sql


# --- DB fixture ---
@pytest.fixture
def sqlite_conn() -> Generator[sqlite3.Connection, None, None]:
    """SQLite インメモリ接続 fixture."""
    conn = sqlite3.connect(":memory:")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def pg_conn() -> Generator[Any, None, None]:
    """PostgreSQL 接続 fixture."""
    import psycopg

    conn = psycopg.connect(POSTGRESQL_URL)
    try:
        yield conn
    finally:
        conn.close()
