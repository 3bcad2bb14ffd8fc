#!/usr/bin/env python3
"""sqlbind Example.

This example demonstrates the basic usage of sqlbind:
- Splitting and running a schema script
- Named parameters that appear more than once in a statement
- Batch inserts
- Parameter metadata
- Statement logging through the standard logging module

Usage:
    uv run python examples/named_parameters_example.py
"""

from __future__ import annotations

import logging
import sqlite3

from sqlbind import (
    LoggingConfig,
    SimpleConnectionProvider,
    execute,
    parse_named_sql,
    parse_sql_script,
    prepare_statement,
    stream,
)

SCHEMA = """
-- Users table
CREATE TABLE users (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    name       TEXT NOT NULL,
    department TEXT,
    salary     INTEGER
);

/* Sample data */
INSERT INTO users (name, department, salary) VALUES ('Tanaka Taro', 'Sales', 400);
INSERT INTO users (name, department, salary) VALUES ('Suzuki Hanako', 'Development', 550);
INSERT INTO users (name, department, salary) VALUES ('Sato Ichiro', 'Sales', 300);
"""


# =============================================================================
# Database Setup
# =============================================================================


def setup_database() -> sqlite3.Connection:
    """Set up SQLite database for the demo."""
    provider = SimpleConnectionProvider(sqlite3.connect, ":memory:")
    conn = provider.get_connection().unwrap()

    status = execute(conn, *parse_sql_script(SCHEMA))
    if status is not None:
        raise status.error
    return conn


# =============================================================================
# Demos
# =============================================================================


def demo_rewrite() -> None:
    """Demo: How named placeholders are rewritten."""
    print("=" * 60)
    print("[REWRITE]")
    print("=" * 60)

    parsed = parse_named_sql("SELECT * FROM users WHERE salary > :low AND salary < :high OR salary = :low")
    print(f"SQL:   {parsed.source_sql}")
    print(f"Rewritten: {parsed.sql}")
    print(f"Index: {dict(parsed.parameter_index)}")
    print()


def demo_select(conn: sqlite3.Connection, config: LoggingConfig) -> None:
    """Demo: One bind call sets every position of the name."""
    print("=" * 60)
    print("[SELECT] :dept appears twice")
    print("=" * 60)

    sql = "SELECT id, name, department FROM users WHERE department = :dept OR :dept = 'ALL' ORDER BY id"
    with prepare_statement(conn, sql, logging_config=config) as stmt:
        stmt.set_string("dept", "Sales")
        for row in stream(stmt.execute_query()):
            print(f"  {row}")
    print()


def demo_batch(conn: sqlite3.Connection, config: LoggingConfig) -> None:
    """Demo: Batch insert."""
    print("=" * 60)
    print("[BATCH INSERT]")
    print("=" * 60)

    # The character before ':' is consumed, so keep a space after '('
    sql = "INSERT INTO users (name, department, salary) VALUES ( :name, :dept, :salary)"
    with prepare_statement(conn, sql, logging_config=config) as stmt:
        for name, dept, salary in [("Yamada Misaki", "Development", 600), ("Ito Ken", "Sales", 350)]:
            stmt.set_string("name", name)
            stmt.set_string("dept", dept)
            stmt.set_int("salary", salary)
            stmt.add_batch()
        print(f"Inserted: {stmt.execute_batch()}")
    conn.commit()
    print()


def demo_metadata(conn: sqlite3.Connection) -> None:
    """Demo: Parameter metadata by name."""
    print("=" * 60)
    print("[METADATA]")
    print("=" * 60)

    sql = "UPDATE users SET salary = salary + :delta WHERE salary + :delta < :limit"
    with prepare_statement(conn, sql) as stmt:
        stmt.set_int("delta", 50)
        stmt.set_int("limit", 500)
        metadata = stmt.parameter_metadata()
        for name in sorted(metadata.parameter_names):
            print(
                f"  {name}: positions={metadata.get_parameter_indexes(name)}"
                f" type={metadata.get_parameter_type_name(name)}"
                f" class={metadata.get_parameter_class_name(name)}"
            )
        print(f"Updated: {stmt.execute_update()}")
    conn.commit()
    print()


def main() -> None:
    """Run all demos."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    logging.getLogger("sqlbind.statement").setLevel(logging.DEBUG)
    config = LoggingConfig.enabled()

    conn = setup_database()
    try:
        demo_rewrite()
        demo_select(conn, config)
        demo_batch(conn, config)
        demo_metadata(conn)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
