"""Parsing of the 100-byte database file header."""

from __future__ import annotations

import struct
from dataclasses import dataclass

HEADER_STRING = b"SQLite format 3\x00"
HEADER_SIZE = 100


class HeaderError(ValueError):
    """Raised when the file header is not a valid database header."""


@dataclass(frozen=True)
class Header:
    """Metadata read from the database file header."""

    page_size: int
    change_counter: int
    database_size: int
    freelist_trunk: int
    freelist_pages: int
    schema_cookie: int
    schema_format: int
    default_cache_size: int
    text_encoding: int
    user_version: int


def parse_header(data: bytes | bytearray | memoryview) -> Header:
    """Parse exactly ``HEADER_SIZE`` bytes into a :class:`Header`."""
    if len(data) != HEADER_SIZE:
        raise HeaderError(f"invalid header size: expected {HEADER_SIZE} bytes, got {len(data)}")
    if bytes(data[:16]) != HEADER_STRING:
        raise HeaderError("invalid SQLite header string")

    (page_size,) = struct.unpack_from(">H", data, 16)
    (
        change_counter,
        database_size,
        freelist_trunk,
        freelist_pages,
        schema_cookie,
        schema_format,
        default_cache_size,
        _largest_root_page,
        text_encoding,
        user_version,
    ) = struct.unpack_from(">10I", data, 24)

    return Header(
        page_size=page_size,
        change_counter=change_counter,
        database_size=database_size,
        freelist_trunk=freelist_trunk,
        freelist_pages=freelist_pages,
        schema_cookie=schema_cookie,
        schema_format=schema_format,
        default_cache_size=default_cache_size,
        text_encoding=text_encoding,
        user_version=user_version,
    )