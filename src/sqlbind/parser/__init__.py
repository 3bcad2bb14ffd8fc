"""SQL パーサーパッケージ."""

from sqlbind.parser.named import (
    ParsedSQL,
    convert_index_buffer_to_parameter_index,
    parse_named_sql,
    parse_sql,
)
from sqlbind.parser.tokenizer import StatementVariable, tokenize

__all__ = [
    "ParsedSQL",
    "StatementVariable",
    "convert_index_buffer_to_parameter_index",
    "parse_named_sql",
    "parse_sql",
    "tokenize",
]
