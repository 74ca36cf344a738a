"""A simple reader for CREATE TABLE statements."""

from __future__ import annotations

from litepage.schema import ColumnInfo


class SQLParseError(ValueError):
    """Raised when a CREATE TABLE statement cannot be understood."""


def parse_table_sql(sql: str) -> tuple[list[ColumnInfo], int]:
    """Extract the columns of a CREATE TABLE statement.

    Returns the columns and the index of the column aliasing the rowid
    (declared ``INTEGER PRIMARY KEY``), or -1 if there is none. Column
    definitions are split on commas, so types with parentheses or
    table constraints are not understood.
    """
    start = sql.find("(")
    if start == -1:
        raise SQLParseError("invalid CREATE TABLE statement: missing opening parenthesis")
    end = sql.rfind(")")
    if end <= start:
        raise SQLParseError("invalid CREATE TABLE statement: missing closing parenthesis")

    columns: list[ColumnInfo] = []
    rowid_index = -1
    for position, definition in enumerate(sql[start + 1 : end].split(",")):
        definition = definition.strip()
        parts = definition.split()
        if len(parts) < 2:
            raise SQLParseError(f"malformed column definition: {definition!r}")
        columns.append(ColumnInfo(name=parts[0].strip('"`'), type=parts[1]))
        if "INTEGER PRIMARY KEY" in definition.upper():
            rowid_index = position
    return columns, rowid_index