"""Schema descriptions of tables and indexes."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ColumnInfo:
    """A column's name and declared type."""

    name: str
    type: str


@dataclass
class TableInfo:
    """Where a table lives and how its columns are laid out."""

    name: str
    root_page: int
    sql: str
    columns: list[ColumnInfo] = field(default_factory=list)
    rowid_column_index: int = -1
    """Index of the column that aliases the rowid, or -1 if none."""


@dataclass
class IndexInfo:
    """Where an index lives and which table it belongs to."""

    name: str
    table_name: str
    root_page: int
    sql: str


@dataclass
class Schema:
    """Tables and indexes of a database, keyed by name."""

    tables: dict[str, TableInfo] = field(default_factory=dict)
    indexes: dict[str, IndexInfo] = field(default_factory=dict)