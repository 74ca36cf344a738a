# litepage

A small reader for SQLite database files that needs only the standard library.
It parses the 100-byte file header and decodes B-tree pages and record
payloads. It reads the schema from `sqlite_schema` and walks table and index
B-trees with plain Python generators. It opens database files read-only and
never writes to them.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from litepage.database import Database
from litepage.execution import filter_records

with Database("example.sqlite") as db:
    print(db.header.page_size)

    schema = db.get_schema()
    table = schema.tables["test"]
    index = schema.indexes["idx_name"]

    # Full table scan, in rowid order
    for record in db.table_scan(table):
        print(record)

    # Look up one row by rowid; yields at most one record
    for record in db.table_seek(table, 250):
        print(record)

    # Look up index entries by key; each entry is (key values..., rowid)
    for entry in db.index_seek(index, ["name300"]):
        print(entry)

    # Walk every index entry in index order
    for entry in db.index_scan(index):
        print(entry)

    # Keep only the rows that pass a predicate
    for record in filter_records(db.table_scan(table), lambda r: r[0] > 450):
        print(record)
```

Records are lists of Python values:

- integers become `int`
- reals become `float`
- text becomes `str`
- blobs become `bytes`
- SQL NULL becomes `None`

If a table has an `INTEGER PRIMARY KEY` column, the row's rowid is placed in
that column. If it has none, the rowid is put in front of the row's other
values. `get_schema()` always includes an entry for `sqlite_schema` itself,
with root page 1.

## Lower-level pieces

- `litepage.header.parse_header(data)` parses the 100-byte file header into a
  `Header`.
- `litepage.page.parse_page(data, page_num)` decodes one page of raw bytes
  into a `Page`, with its cells. Page 1 skips the file header.
- `litepage.record.parse_record(data)` decodes a record payload.
- `litepage.record.read_varint(data)` decodes a varint and returns
  `(value, bytes_read)`.
- `litepage.record.compare_records(a, b)` and `compare_values(a, b)` compare
  values using SQLite's ordering, NULL < numbers < text < blob, and return
  -1, 0 or 1.
- `litepage.parser.parse_table_sql(sql)` reads the column names and types from
  a simple `CREATE TABLE` statement. It also returns the position of the
  column that aliases the rowid, or -1 if there is none.
- `litepage.schema` holds the `ColumnInfo`, `TableInfo`, `IndexInfo` and
  `Schema` dataclasses.

## Errors

Each step raises its own exception type when it fails:

- `RecordError` for record payloads.
- `HeaderError` for the file header.
- `SQLParseError` for `CREATE TABLE` statements.
- `DatabaseError` for opening the file, reading pages and reading the schema.
  It is also raised for unexpected page types during seeks and scans.

`parse_page` raises `ValueError` for a truncated page or a cell that runs past
the end of its page.

## What it does not do

- It does not run SQL queries. The only processing step it offers is
  `filter_records`.
- It has no command-line tool.
- It does not write or modify database files.
- It does not follow overflow pages. A record too large to fit in its page
  raises an error.
- Text is always decoded as UTF-8, whatever the header's text encoding says.
- The `CREATE TABLE` reader splits column definitions on commas. Because of
  this, it cannot handle types with parentheses or table-level constraints.