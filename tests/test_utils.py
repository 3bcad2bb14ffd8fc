"""データベース関連ユーティリティのテスト."""

from __future__ import annotations

import sqlite3
from unittest.mock import MagicMock

import pytest

from sqlbind.exceptions import NullArgumentError
from sqlbind.utils import ExecStatus, execute, execute_script, parse_sql_script, stream


class TestParseSqlScript:
    """SQL スクリプトの分割を検証する."""

    def test_empty(self) -> None:
        assert parse_sql_script("") == []

    def test_whitespace_only(self) -> None:
        assert parse_sql_script(" \n\t ") == []

    def test_none(self) -> None:
        with pytest.raises(NullArgumentError):
            parse_sql_script(None)  # type: ignore[arg-type]

    def test_split(self) -> None:
        script = "CREATE TABLE t (a int);\nINSERT INTO t VALUES (1);\n"
        assert parse_sql_script(script) == ["CREATE TABLE t (a int);", "INSERT INTO t VALUES (1);"]

    def test_fold_lines(self) -> None:
        script = "SELECT a,\n       b\nFROM   t\nWHERE  a = 1;\n"
        assert parse_sql_script(script) == ["SELECT a, b FROM t WHERE a = 1;"]

    def test_line_comment(self) -> None:
        script = "-- create table\nCREATE TABLE t (a int); -- trailing\n"
        assert parse_sql_script(script) == ["CREATE TABLE t (a int);"]

    def test_block_comment(self) -> None:
        script = "/* header\n   comment */\nSELECT /* inline */ 1;\n"
        assert parse_sql_script(script) == ["SELECT 1;"]

    def test_quoted_semicolon(self) -> None:
        script = "INSERT INTO t VALUES ('x;y');\nSELECT 1;"
        assert parse_sql_script(script) == ["INSERT INTO t VALUES ('x;y');", "SELECT 1;"]

    def test_quoted_comment_marker(self) -> None:
        assert parse_sql_script("SELECT '--x' FROM t;") == ["SELECT '--x' FROM t;"]

    def test_double_quoted(self) -> None:
        assert parse_sql_script('SELECT "a;b" FROM t;') == ['SELECT "a;b" FROM t;']

    def test_minus_operator(self) -> None:
        assert parse_sql_script("SELECT a - b FROM t;") == ["SELECT a - b FROM t;"]

    def test_last_statement_without_semicolon(self) -> None:
        assert parse_sql_script("SELECT 1;\nSELECT 2") == ["SELECT 1;", "SELECT 2"]


class TestExecute:
    """execute のコミットとロールバックを検証する."""

    def test_success(self, sqlite_conn: sqlite3.Connection) -> None:
        result = execute(
            sqlite_conn,
            "CREATE TABLE t (a INTEGER)",
            "  ",
            "INSERT INTO t VALUES (1)",
        )
        assert result is None
        assert sqlite_conn.execute("SELECT a FROM t").fetchall() == [(1,)]

    def test_failure(self, sqlite_conn: sqlite3.Connection) -> None:
        sqlite_conn.execute("CREATE TABLE t (a INTEGER)")
        sqlite_conn.commit()
        result = execute(sqlite_conn, "INSERT INTO t VALUES (1)", "INSERT INTO missing VALUES (1)")
        assert isinstance(result, ExecStatus)
        assert result.command == "INSERT INTO missing VALUES (1)"
        assert isinstance(result.error, sqlite3.OperationalError)
        assert sqlite_conn.execute("SELECT COUNT(*) FROM t").fetchone() == (0,)

    def test_commit_called(self) -> None:
        conn = MagicMock(autocommit=False)
        assert execute(conn, "SELECT 1") is None
        conn.commit.assert_called_once_with()

    def test_autocommit_skips_commit(self) -> None:
        conn = MagicMock(autocommit=True)
        assert execute(conn, "SELECT 1") is None
        conn.commit.assert_not_called()

    def test_commit_failure(self) -> None:
        conn = MagicMock(autocommit=False)
        conn.commit.side_effect = RuntimeError("commit")
        result = execute(conn, "SELECT 1")
        assert result is not None
        assert result.command == "commit;"
        conn.rollback.assert_called_once_with()

    def test_rollback_failure_noted(self) -> None:
        conn = MagicMock(autocommit=False)
        conn.cursor.return_value.execute.side_effect = RuntimeError("execute")
        conn.rollback.side_effect = RuntimeError("rollback")
        result = execute(conn, "SELECT 1")
        assert result is not None
        assert str(result.error) == "execute"
        assert any("rollback" in note for note in result.error.__notes__)

    def test_cursor_closed(self) -> None:
        conn = MagicMock(autocommit=False)
        conn.cursor.return_value.execute.side_effect = RuntimeError("execute")
        execute(conn, "SELECT 1")
        conn.cursor.return_value.close.assert_called_once_with()

    def test_none_connection(self) -> None:
        with pytest.raises(NullArgumentError):
            execute(None, "SELECT 1")

    def test_non_driver_error_propagates(self, sqlite_conn: sqlite3.Connection) -> None:
        with pytest.raises(AttributeError):
            execute(sqlite_conn, 123)  # type: ignore[arg-type]

    def test_only_driver_errors_captured(self) -> None:
        conn = MagicMock(autocommit=False, Error=sqlite3.Error)
        conn.cursor.return_value.execute.side_effect = sqlite3.OperationalError("driver")
        result = execute(conn, "SELECT 1")
        assert result is not None
        assert isinstance(result.error, sqlite3.OperationalError)
        conn.rollback.assert_called_once_with()

    def test_other_errors_propagate(self) -> None:
        conn = MagicMock(autocommit=False, Error=sqlite3.Error)
        conn.cursor.return_value.execute.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError, match="bug"):
            execute(conn, "SELECT 1")
        conn.commit.assert_not_called()
        conn.cursor.return_value.close.assert_called_once_with()

    def test_execute_script(self, sqlite_conn: sqlite3.Connection) -> None:
        script = """
            -- schema
            CREATE TABLE t (a INTEGER, b TEXT);
            INSERT INTO t VALUES (1, 'x;y');
            /* data */
            INSERT INTO t VALUES (2, 'z');
        """
        assert execute_script(sqlite_conn, script) is None
        assert sqlite_conn.execute("SELECT a, b FROM t ORDER BY a").fetchall() == [(1, "x;y"), (2, "z")]


class TestStream:
    """stream の行変換を検証する."""

    def test_rows_as_dicts(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute("SELECT 1 AS id, 'a' AS name UNION ALL SELECT 2, 'b'")
        assert list(stream(cursor)) == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

    def test_lazy(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute("SELECT 1 AS id UNION ALL SELECT 2")
        rows = stream(cursor)
        assert next(rows) == {"id": 1}
        assert cursor.fetchone() == (2,)

    def test_no_result_set(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute("CREATE TABLE t (a INTEGER)")
        assert list(stream(cursor)) == []

    def test_dict_rows(self) -> None:
        cursor = MagicMock()
        cursor.description = [("id",)]
        cursor.fetchone.side_effect = [{"id": 1}, None]
        assert list(stream(cursor)) == [{"id": 1}]
