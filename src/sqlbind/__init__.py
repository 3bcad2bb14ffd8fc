"""sqlbind: Named-parameter statements for DB-API connections."""

from sqlbind.connection import (
    ConnectionProvider,
    ConnectionStatus,
    SimpleConnectionProvider,
    StaticConnectionProvider,
)
from sqlbind.dbapi import CursorStatement
from sqlbind.exceptions import (
    BlankArgumentError,
    EmptyArgumentError,
    InvalidArgumentError,
    NullArgumentError,
    SqlbindError,
    StatementError,
    UnboundParameterError,
    UnknownParameterError,
)
from sqlbind.metadata import ParameterMetaData, PositionalParameterMetaData
from sqlbind.observability import LoggingConfig, StatementLogger, StatementValue
from sqlbind.parser import (
    ParsedSQL,
    convert_index_buffer_to_parameter_index,
    parse_named_sql,
    parse_sql,
)
from sqlbind.sql_type import ParameterNullability, SqlType
from sqlbind.statement import EnhancedStatement, PositionalStatement, prepare_statement
from sqlbind.utils import ExecStatus, execute, parse_sql_script, stream

__all__ = [
    "BlankArgumentError",
    "ConnectionProvider",
    "ConnectionStatus",
    "CursorStatement",
    "EmptyArgumentError",
    "EnhancedStatement",
    "ExecStatus",
    "InvalidArgumentError",
    "LoggingConfig",
    "NullArgumentError",
    "ParameterMetaData",
    "ParameterNullability",
    "ParsedSQL",
    "PositionalParameterMetaData",
    "PositionalStatement",
    "SimpleConnectionProvider",
    "SqlType",
    "SqlbindError",
    "StatementError",
    "StatementLogger",
    "StatementValue",
    "StaticConnectionProvider",
    "UnboundParameterError",
    "UnknownParameterError",
    "convert_index_buffer_to_parameter_index",
    "execute",
    "parse_named_sql",
    "parse_sql",
    "parse_sql_script",
    "prepare_statement",
    "stream",
]
