"""Read-only access to a database file: page reads, B-Tree seeks and scans."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import BinaryIO, Union

from litepage.header import HEADER_SIZE, Header, HeaderError, parse_header
from litepage.page import Page, PageType, parse_page
from litepage.parser import parse_table_sql
from litepage.record import Record, compare_records
from litepage.schema import IndexInfo, Schema, TableInfo

_SCHEMA_TABLE = TableInfo(
    name="sqlite_schema",
    root_page=1,
    sql="CREATE TABLE sqlite_schema(type text, name text, tbl_name text, rootpage integer, sql text)",
    rowid_column_index=-1,
)


class DatabaseError(Exception):
    """Raised when the database file cannot be read or is inconsistent."""


def _lower_bound(count: int, predicate: Callable[[int], bool]) -> int:
    """Return the smallest index in ``range(count)`` for which ``predicate`` holds."""
    low, high = 0, count
    while low < high:
        middle = (low + high) // 2
        if predicate(middle):
            high = middle
        else:
            low = middle + 1
    return low


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _unexpected(page: Page, action: str) -> DatabaseError:
    return DatabaseError(f"unexpected page type {int(page.type):02x} encountered during {action}")


def _table_row(table: TableInfo, row_id: int, record: Record) -> Record:
    """Put the rowid into the row: in its alias column, or in front of it."""
    if table.rowid_column_index == -1:
        return [row_id, *record]
    row = list(record)
    if table.rowid_column_index >= len(row):
        row.extend([None] * (table.rowid_column_index + 1 - len(row)))
    row[table.rowid_column_index] = row_id
    return row


class Database:
    """An open database file with its parsed header."""

    def __init__(self, path: Union[str, Path]) -> None:
        try:
            self._file: BinaryIO = open(path, "rb")
        except OSError as exc:
            raise DatabaseError(f"failed to open database file: {exc}") from exc
        try:
            header_bytes = self._file.read(HEADER_SIZE)
            if len(header_bytes) != HEADER_SIZE:
                raise DatabaseError(
                    f"failed to read database header: got {len(header_bytes)} of {HEADER_SIZE} bytes"
                )
            try:
                self.header: Header = parse_header(header_bytes)
            except HeaderError as exc:
                raise DatabaseError(f"failed to parse database header: {exc}") from exc
        except BaseException:
            self._file.close()
            raise

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def read_page(self, page_num: int) -> Page:
        """Read and parse the page with the given 1-based number."""
        page_size = self.header.page_size
        if page_num < 1:
            raise DatabaseError(f"failed to read page {page_num}: invalid page number")
        try:
            self._file.seek((page_num - 1) * page_size)
            data = self._file.read(page_size)
        except (OSError, ValueError) as exc:
            raise DatabaseError(f"failed to read page {page_num}: {exc}") from exc
        if len(data) != page_size:
            raise DatabaseError(
                f"failed to read page {page_num}: got {len(data)} of {page_size} bytes"
            )
        return parse_page(data, page_num)

    def table_seek(self, table: TableInfo, row_id: int) -> Iterator[Record]:
        """Yield the row with the given rowid, or nothing if it is absent."""
        page_num = table.root_page
        while True:
            page = self.read_page(page_num)
            if page.type == PageType.LEAF_TABLE:
                cells = page.leaf_cells
                position = bisect_left(cells, row_id, key=lambda cell: cell.row_id)
                if position < len(cells) and cells[position].row_id == row_id:
                    cell = cells[position]
                    yield _table_row(table, cell.row_id, cell.record)
                return
            if page.type == PageType.INTERIOR_TABLE:
                cells = page.interior_cells
                position = bisect_left(cells, row_id, key=lambda cell: cell.key)
                if position < len(cells):
                    page_num = cells[position].left_child_page_num
                else:
                    page_num = page.right_most_ptr
                continue
            raise _unexpected(page, "search")

    def index_seek(self, index: IndexInfo, key: Sequence) -> Iterator[Record]:
        """Yield every index record whose leading columns equal ``key``."""
        key = list(key)
        width = len(key)
        page_num = index.root_page
        while True:
            page = self.read_page(page_num)
            if page.type == PageType.LEAF_INDEX:
                cells = page.leaf_index_cells
                start = _lower_bound(
                    len(cells),
                    lambda i: compare_records(cells[i].payload[:width], key) >= 0,
                )
                for cell in cells[start:]:
                    if len(cell.payload) < width:
                        continue
                    if compare_records(cell.payload[:width], key) != 0:
                        break
                    yield cell.payload
                return
            if page.type == PageType.INTERIOR_INDEX:
                cells = page.interior_index_cells
                position = _lower_bound(
                    len(cells), lambda i: compare_records(key, cells[i].payload) <= 0
                )
                if position < len(cells):
                    page_num = cells[position].left_child_page_num
                else:
                    page_num = page.right_most_ptr
                continue
            raise _unexpected(page, "index search")

    def index_scan(self, index: IndexInfo) -> Iterator[Record]:
        """Yield every index record in index order."""
        return self._index_scan_page(index.root_page)

    def _index_scan_page(self, page_num: int) -> Iterator[Record]:
        page = self.read_page(page_num)
        if page.type == PageType.LEAF_INDEX:
            for cell in page.leaf_index_cells:
                yield cell.payload
        elif page.type == PageType.INTERIOR_INDEX:
            for cell in page.interior_index_cells:
                yield from self._index_scan_page(cell.left_child_page_num)
                yield cell.payload
            yield from self._index_scan_page(page.right_most_ptr)
        else:
            raise _unexpected(page, "index scan")

    def table_scan(self, table: TableInfo) -> Iterator[Record]:
        """Yield every row of the table in rowid order."""
        return self._table_scan_page(table.root_page, table)

    def _table_scan_page(self, page_num: int, table: TableInfo) -> Iterator[Record]:
        page = self.read_page(page_num)
        if page.type == PageType.LEAF_TABLE:
            for cell in page.leaf_cells:
                yield _table_row(table, cell.row_id, cell.record)
        elif page.type == PageType.INTERIOR_TABLE:
            for cell in page.interior_cells:
                yield from self._table_scan_page(cell.left_child_page_num, table)
            yield from self._table_scan_page(page.right_most_ptr, table)
        else:
            raise _unexpected(page, "scan")

    def get_schema(self) -> Schema:
        """Read the tables and indexes described by the schema table."""
        schema = Schema()
        schema.tables[_SCHEMA_TABLE.name] = _SCHEMA_TABLE

        try:
            rows = list(self.table_scan(_SCHEMA_TABLE))
        except DatabaseError as exc:
            raise DatabaseError(f"failed to scan schema table: {exc}") from exc

        for row in rows:
            if len(row) < 6:
                raise DatabaseError(
                    f"malformed schema record: expected at least 6 columns, got {len(row)}"
                )
            item_type = row[1]
            if not isinstance(item_type, str):
                raise DatabaseError("malformed schema record: column 1 (type) is not a string")
            name, table_name, root_page, sql = row[2], row[3], row[4], row[5]

            if item_type == "table":
                if not (isinstance(name, str) and _is_int(root_page) and isinstance(sql, str)):
                    raise DatabaseError(
                        f"malformed schema record for table {name!r}: "
                        "one or more columns have an unexpected type"
                    )
                try:
                    columns, rowid_index = parse_table_sql(sql)
                except ValueError as exc:
                    raise DatabaseError(
                        f"failed to parse schema for table {name!r}: {exc}"
                    ) from exc
                schema.tables[name] = TableInfo(
                    name=name,
                    root_page=root_page,
                    sql=sql,
                    columns=columns,
                    rowid_column_index=rowid_index,
                )
            elif item_type == "index":
                if not (
                    isinstance(name, str)
                    and isinstance(table_name, str)
                    and _is_int(root_page)
                    and isinstance(sql, str)
                ):
                    raise DatabaseError(
                        f"malformed schema record for index {name!r}: "
                        "one or more columns have an unexpected type"
                    )
                schema.indexes[name] = IndexInfo(
                    name=name, table_name=table_name, root_page=root_page, sql=sql
                )
        return schema