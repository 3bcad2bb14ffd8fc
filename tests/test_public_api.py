"""公開 API のテスト."""

from __future__ import annotations

import sqlite3


class TestPublicImports:
    """sqlbind パッケージからの公開インポート."""

    def test_import_prepare_statement(self) -> None:
        """prepare_statement をインポートできる."""
        from sqlbind import prepare_statement

        assert callable(prepare_statement)

    def test_import_parser(self) -> None:
        """パーサー関数をインポートできる."""
        from sqlbind import convert_index_buffer_to_parameter_index, parse_named_sql, parse_sql

        assert callable(parse_sql)
        assert callable(parse_named_sql)
        assert callable(convert_index_buffer_to_parameter_index)

    def test_import_exceptions(self) -> None:
        """例外クラスをインポートできる."""
        from sqlbind import InvalidArgumentError, SqlbindError, StatementError, UnknownParameterError

        assert issubclass(InvalidArgumentError, SqlbindError)
        assert issubclass(UnknownParameterError, StatementError)

    def test_all_exports(self) -> None:
        """__all__ に必要な名前が含まれる."""
        import sqlbind

        expected = {
            "EnhancedStatement",
            "CursorStatement",
            "LoggingConfig",
            "ParameterMetaData",
            "ParameterNullability",
            "ParsedSQL",
            "SqlType",
            "SqlbindError",
            "UnknownParameterError",
            "parse_sql",
            "parse_named_sql",
            "convert_index_buffer_to_parameter_index",
            "prepare_statement",
            "parse_sql_script",
            "execute",
            "stream",
        }
        assert expected <= set(sqlbind.__all__)
        for name in sqlbind.__all__:
            assert hasattr(sqlbind, name)


class TestPrepareStatement:
    """prepare_statement 便利関数の検証."""

    def test_basic(self) -> None:
        from sqlbind import EnhancedStatement, prepare_statement

        conn = sqlite3.connect(":memory:")
        try:
            with prepare_statement(conn, "SELECT :a + :a") as stmt:
                assert isinstance(stmt, EnhancedStatement)
                assert stmt.sql == "SELECT ? + ?"
                stmt.set_int("a", 2)
                assert stmt.execute_query().fetchone() == (4,)
            assert stmt.closed is True
        finally:
            conn.close()

    def test_format_placeholder(self) -> None:
        from sqlbind import prepare_statement

        conn = sqlite3.connect(":memory:")
        try:
            stmt = prepare_statement(conn, "SELECT * FROM t WHERE id = :id", placeholder="%s")
            assert stmt.sql == "SELECT * FROM t WHERE id = %s"
            stmt.close()
        finally:
            conn.close()
