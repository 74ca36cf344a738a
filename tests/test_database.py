import sqlite3
from itertools import islice

import pytest

from litepage.database import Database, DatabaseError
from litepage.page import PageType
from litepage.record import compare_records
from litepage.schema import ColumnInfo

TABLE_SQL = "CREATE TABLE test(id INTEGER PRIMARY KEY, name TEXT)"


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.sqlite"
    connection = sqlite3.connect(path)
    connection.execute("PRAGMA page_size = 4096")
    connection.execute(TABLE_SQL)
    connection.execute("CREATE INDEX idx_name ON test(name)")
    connection.executemany(
        "INSERT INTO test(id, name) VALUES (?, ?)",
        [(i, f"name{i}") for i in range(1, 501)],
    )
    connection.commit()
    connection.close()
    return path


@pytest.fixture
def db(db_path):
    with Database(db_path) as database:
        yield database


@pytest.fixture
def schema(db):
    return db.get_schema()


def test_table_seek_existing(db, schema):
    records = list(db.table_seek(schema.tables["test"], 250))
    assert records == [[250, "name250"]]


def test_table_seek_missing(db, schema):
    assert list(db.table_seek(schema.tables["test"], 9999)) == []


def test_index_seek_existing(db, schema):
    records = list(db.index_seek(schema.indexes["idx_name"], ["name300"]))
    assert records == [["name300", 300]]


def test_index_seek_missing(db, schema):
    assert list(db.index_seek(schema.indexes["idx_name"], ["non_existent_name"])) == []


def test_index_scan_is_sorted_and_complete(db, schema):
    records = list(db.index_scan(schema.indexes["idx_name"]))
    assert len(records) == 500
    assert all(compare_records(a, b) <= 0 for a, b in zip(records, records[1:]))
    assert sorted(r[1] for r in records) == list(range(1, 501))


def test_full_table_scan(db, schema):
    records = list(db.table_scan(schema.tables["test"]))
    assert len(records) == 500
    assert records[0] == [1, "name1"]
    assert records[-1] == [500, "name500"]


def test_stopped_table_scan(db, schema):
    records = list(islice(db.table_scan(schema.tables["test"]), 10))
    assert [r[0] for r in records] == list(range(1, 11))


def test_schema_table_scan_prepends_rowid(db):
    schema = db.get_schema()
    rows = list(db.table_scan(schema.tables["sqlite_schema"]))
    assert len(rows) == 2
    assert {row[1] for row in rows} == {"table", "index"}
    assert all(isinstance(row[0], int) for row in rows)


def test_get_schema(schema):
    assert len(schema.tables) == 2
    table = schema.tables["test"]
    assert table.name == "test"
    assert table.root_page not in (0, 1)
    assert table.sql == TABLE_SQL
    assert table.columns == [ColumnInfo("id", "INTEGER"), ColumnInfo("name", "TEXT")]
    assert table.rowid_column_index == 0

    schema_table = schema.tables["sqlite_schema"]
    assert schema_table.name == "sqlite_schema"
    assert schema_table.root_page == 1

    assert len(schema.indexes) == 1
    assert schema.indexes["idx_name"].table_name == "test"


def test_read_page_one(db):
    page = db.read_page(1)
    assert page.type == PageType.LEAF_TABLE
    assert page.cell_count == 2
    assert len(page.cell_pointers) == 2
    assert len(page.leaf_cells) == 2
    table_cells = [c for c in page.leaf_cells if c.record and c.record[0] == "table"]
    assert len(table_cells) == 1
    record = table_cells[0].record
    assert len(record) == 5
    assert record[1] == "test"
    assert isinstance(record[3], int) and record[3] != 0
    assert record[4] == TABLE_SQL


def test_interior_table_page(db):
    schema_page = db.read_page(1)
    root = next(c.record[3] for c in schema_page.leaf_cells if c.record[0] == "table")
    page = db.read_page(root)
    assert page.type == PageType.INTERIOR_TABLE
    assert page.cell_count > 0
    assert len(page.interior_cells) == page.cell_count


def test_interior_index_page(db, schema):
    root = db.read_page(schema.indexes["idx_name"].root_page)
    assert root.type == PageType.INTERIOR_INDEX
    assert root.cell_count > 0
    leaf = db.read_page(root.interior_index_cells[0].left_child_page_num)
    assert leaf.type == PageType.LEAF_INDEX


def test_header_page_size(db):
    assert db.header.page_size == 4096


def test_open_missing_file(tmp_path):
    with pytest.raises(DatabaseError, match="failed to open database file"):
        Database(tmp_path / "missing.sqlite")


def test_open_invalid_file(tmp_path):
    path = tmp_path / "bad.sqlite"
    path.write_bytes(b"This is not SQLite" + bytes(200))
    with pytest.raises(DatabaseError, match="failed to parse database header"):
        Database(path)


def test_open_short_file(tmp_path):
    path = tmp_path / "short.sqlite"
    path.write_bytes(b"SQLite")
    with pytest.raises(DatabaseError, match="failed to read database header"):
        Database(path)


def test_read_page_past_end(db):
    with pytest.raises(DatabaseError, match="failed to read page"):
        db.read_page(db.header.database_size + 10)


def test_read_page_invalid_number(db):
    with pytest.raises(DatabaseError):
        db.read_page(0)