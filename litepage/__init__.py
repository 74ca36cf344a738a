"""Read-only access to SQLite database files: header, pages, records, schema and B-tree scans."""

__version__ = "0.1.0"