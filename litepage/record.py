"""Decoding of record payloads and the ordering rules used by index B-Trees."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Union

Value = Union[None, int, float, str, bytes]
"""A single column value. SQL NULL is represented by ``None``."""

Record = list
"""A row of decoded column values."""

_MAX_VARINT_BYTES = 9
_INT_WIDTHS = {1: 1, 2: 2, 3: 3, 4: 4, 5: 6, 6: 8}
_INT_NAMES = {1: "8-bit", 2: "16-bit", 3: "24-bit", 4: "32-bit", 5: "48-bit", 6: "64-bit"}


class RecordError(ValueError):
    """Raised when a record payload cannot be decoded."""


def read_varint(data: bytes | bytearray | memoryview) -> tuple[int, int]:
    """Read a big-endian varint of up to nine bytes.

    Returns the value as a signed 64-bit integer and the number of bytes read.
    A truncated varint yields whatever was read so far.
    """
    value = 0
    length = 0
    for position, byte in enumerate(bytes(data[:_MAX_VARINT_BYTES])):
        length += 1
        if position == _MAX_VARINT_BYTES - 1:
            value = (value << 8) | byte
            break
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            break
    value &= (1 << 64) - 1
    if value >= 1 << 63:
        value -= 1 << 64
    return value, length


def serial_type_to_value(serial_type: int, body: bytes | bytearray | memoryview) -> tuple[Value, int]:
    """Decode one value of the given serial type from the start of ``body``.

    Returns the value and the number of bytes it occupied.
    """
    if serial_type >= 12 and serial_type % 2 == 0:
        length = (serial_type - 12) // 2
        if len(body) < length:
            raise RecordError(f"insufficient data for BLOB of length {length}")
        return bytes(body[:length]), length
    if serial_type >= 13 and serial_type % 2 == 1:
        length = (serial_type - 13) // 2
        if len(body) < length:
            raise RecordError(f"insufficient data for TEXT of length {length}")
        return bytes(body[:length]).decode("utf-8", errors="surrogateescape"), length

    if serial_type == 0:
        return None, 0
    if serial_type in _INT_WIDTHS:
        width = _INT_WIDTHS[serial_type]
        if len(body) < width:
            raise RecordError(f"insufficient data for {_INT_NAMES[serial_type]} integer")
        return int.from_bytes(bytes(body[:width]), "big", signed=True), width
    if serial_type == 7:
        if len(body) < 8:
            raise RecordError("insufficient data for 64-bit float")
        (number,) = struct.unpack_from(">d", body, 0)
        return number, 8
    if serial_type == 8:
        return 0, 0
    if serial_type == 9:
        return 1, 0
    raise RecordError(f"unsupported serial type {serial_type}")


def parse_record(data: bytes | bytearray | memoryview) -> Record:
    """Decode a record payload (header of serial types followed by the body)."""
    view = memoryview(bytes(data))
    header_size, prefix_len = read_varint(view)
    if header_size > len(view):
        raise RecordError(
            f"invalid record: header size {header_size} is larger than payload size {len(view)}"
        )

    header = view[prefix_len:header_size] if header_size >= prefix_len else view[0:0]
    body = view[max(header_size, 0):]

    serial_types = []
    position = 0
    while position < len(header):
        serial_type, consumed = read_varint(header[position:])
        serial_types.append(serial_type)
        position += consumed

    record: Record = []
    offset = 0
    for column, serial_type in enumerate(serial_types):
        try:
            value, consumed = serial_type_to_value(serial_type, body[offset:])
        except RecordError as exc:
            raise RecordError(f"invalid record: column {column}: {exc}") from exc
        if offset + consumed > len(body):
            raise RecordError(f"invalid record: data for column {column} extends beyond body")
        record.append(value)
        offset += consumed
    return record


def _type_rank(value: object) -> int:
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, (bytes, bytearray, memoryview)):
        return 3
    return 4


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def compare_values(a: object, b: object) -> int:
    """Compare two values: NULL < numbers < text < blobs. Returns -1, 0 or 1."""
    rank_a = _type_rank(a)
    rank_b = _type_rank(b)
    if rank_a != rank_b:
        return -1 if rank_a < rank_b else 1
    if rank_a == 1:
        return _sign(float(a), float(b))
    if rank_a == 2:
        return _sign(a, b)
    if rank_a == 3:
        return _sign(bytes(a), bytes(b))
    return 0


def compare_records(a: Sequence, b: Sequence) -> int:
    """Compare two records column by column; a proper prefix sorts first."""
    for left, right in zip(a, b):
        result = compare_values(left, right)
        if result:
            return result
    return _sign(len(a), len(b))