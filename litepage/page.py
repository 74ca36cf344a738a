"""Parsing of B-Tree pages into their cells."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

from litepage.header import HEADER_SIZE
from litepage.record import Record, RecordError, parse_record, read_varint


class PageType(IntEnum):
    """The kinds of B-Tree page, identified by the first header byte."""

    INTERIOR_INDEX = 0x02
    INTERIOR_TABLE = 0x05
    LEAF_INDEX = 0x0A
    LEAF_TABLE = 0x0D


_INTERIOR_TYPES = (PageType.INTERIOR_INDEX, PageType.INTERIOR_TABLE)


@dataclass
class LeafTableCell:
    """A row stored in a leaf table page: its rowid and decoded record."""

    payload_size: int
    row_id: int
    record: Record


@dataclass
class InteriorTableCell:
    """A pointer to a child page and the largest rowid it holds."""

    left_child_page_num: int
    key: int


@dataclass
class LeafIndexCell:
    """An index entry: the indexed values followed by the rowid."""

    payload_size: int
    payload: Record


@dataclass
class InteriorIndexCell:
    """A pointer to a child page and the separator key record."""

    left_child_page_num: int
    payload: Record


@dataclass
class Page:
    """A parsed B-Tree page."""

    type: Union[PageType, int]
    freeblock: int
    cell_count: int
    cell_content: int
    fragmented: int
    right_most_ptr: int = 0
    cell_pointers: list[int] = field(default_factory=list)
    leaf_cells: list[LeafTableCell] = field(default_factory=list)
    interior_cells: list[InteriorTableCell] = field(default_factory=list)
    leaf_index_cells: list[LeafIndexCell] = field(default_factory=list)
    interior_index_cells: list[InteriorIndexCell] = field(default_factory=list)
    raw_data: bytes = b""


def _payload(view: memoryview, start: int, size: int, page_num: int) -> memoryview:
    if size < 0 or start + size > len(view):
        raise ValueError(f"cell payload of {size} bytes extends beyond page {page_num}")
    return view[start : start + size]


def _child_pointer(view: memoryview, page_num: int) -> int:
    if len(view) < 4:
        raise ValueError(f"truncated child pointer on page {page_num}")
    (child,) = struct.unpack_from(">I", view, 0)
    return child


def _parse_record_in(payload: memoryview, description: str, index: int, page_num: int) -> Record:
    try:
        return parse_record(payload)
    except RecordError as exc:
        raise RecordError(
            f"failed to parse record in {description} {index} on page {page_num}: {exc}"
        ) from exc


def parse_page(data: bytes | bytearray | memoryview, page_num: int) -> Page:
    """Parse the raw bytes of a page.

    ``page_num`` is 1-based; page 1 starts with the file header, which is
    skipped before the page header is read.
    """
    raw = bytes(data)
    view = memoryview(raw)
    offset = HEADER_SIZE if page_num == 1 else 0

    try:
        type_byte, freeblock, cell_count, cell_content, fragmented = struct.unpack_from(
            ">BHHHB", view, offset
        )
    except struct.error as exc:
        raise ValueError(f"page {page_num} is too short for a page header") from exc

    try:
        page_type: Union[PageType, int] = PageType(type_byte)
    except ValueError:
        page_type = type_byte

    page = Page(
        type=page_type,
        freeblock=freeblock,
        cell_count=cell_count,
        cell_content=cell_content,
        fragmented=fragmented,
        raw_data=raw,
    )

    header_size = 8
    try:
        if page_type in _INTERIOR_TYPES:
            header_size = 12
            (page.right_most_ptr,) = struct.unpack_from(">I", view, offset + 8)
        page.cell_pointers = list(
            struct.unpack_from(f">{cell_count}H", view, offset + header_size)
        )
    except struct.error as exc:
        raise ValueError(f"page {page_num} is too short for its cell pointer array") from exc

    for index, cell_offset in enumerate(page.cell_pointers):
        cell = view[cell_offset:]
        if page_type == PageType.LEAF_TABLE:
            payload_size, n = read_varint(cell)
            row_id, m = read_varint(cell[n:])
            payload = _payload(cell, n + m, payload_size, page_num)
            record = _parse_record_in(payload, "cell", index, page_num)
            page.leaf_cells.append(LeafTableCell(payload_size, row_id, record))
        elif page_type == PageType.INTERIOR_TABLE:
            child = _child_pointer(cell, page_num)
            key, _ = read_varint(cell[4:])
            page.interior_cells.append(InteriorTableCell(child, key))
        elif page_type == PageType.LEAF_INDEX:
            payload_size, n = read_varint(cell)
            payload = _payload(cell, n, payload_size, page_num)
            record = _parse_record_in(payload, "leaf index cell", index, page_num)
            page.leaf_index_cells.append(LeafIndexCell(payload_size, record))
        elif page_type == PageType.INTERIOR_INDEX:
            child = _child_pointer(cell, page_num)
            payload_size, n = read_varint(cell[4:])
            payload = _payload(cell, 4 + n, payload_size, page_num)
            record = _parse_record_in(payload, "interior index cell", index, page_num)
            page.interior_index_cells.append(InteriorIndexCell(child, record))

    return page