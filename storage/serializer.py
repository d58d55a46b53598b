"""
PageDB Row Serializer
=====================
Converts a Row to and from its fixed ROW_SIZE-byte record.

Record layout (see storage.schema):
  [id: 4B uint32 LE] [username: 33B NUL-padded] [email: 256B NUL-padded]

Text fields shorter than their slot are zero-padded. A field that fills its
whole capacity still gets its terminator, because each slot is one byte
larger than the column capacity.

Decoding performs no validation: whatever bytes the page holds are read up
to the first NUL of each text slot.
"""

import struct
from typing import Optional

from storage.schema import (
    COLUMN_EMAIL_SIZE, COLUMN_USERNAME_SIZE, EMAIL_SIZE, ROW_SIZE,
    TEXT_ENCODING, USERNAME_SIZE, Row,
)

ROW_FMT = f"<I{USERNAME_SIZE}s{EMAIL_SIZE}s"
ROW_STRUCT = struct.Struct(ROW_FMT)

assert ROW_STRUCT.size == ROW_SIZE, "row struct does not match declared layout"


def _encode_text(value: str, capacity: int) -> bytes:
    data = value.encode(TEXT_ENCODING)
    if len(data) > capacity:
        raise ValueError(f"text is {len(data)} bytes, capacity is {capacity}")
    return data


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode(TEXT_ENCODING, errors="replace")


def serialize_row(row: Row, dest=None, offset: int = 0) -> Optional[bytes]:
    """
    Encode a row.

    With no destination, returns a fresh ROW_SIZE-byte bytes object.
    With a writable buffer (bytearray, memoryview of a page), writes the
    record in place at `offset` and returns None.

    Raises ValueError / struct.error if the row does not fit its slots;
    callers validate rows before they reach the codec.
    """
    username = _encode_text(row.username, COLUMN_USERNAME_SIZE)
    email = _encode_text(row.email, COLUMN_EMAIL_SIZE)
    if dest is None:
        return ROW_STRUCT.pack(row.id, username, email)
    ROW_STRUCT.pack_into(dest, offset, row.id, username, email)
    return None


def deserialize_row(data, offset: int = 0) -> Row:
    """Decode the record starting at `offset` in `data`."""
    row_id, username, email = ROW_STRUCT.unpack_from(data, offset)
    return Row(id=row_id, username=_decode_text(username), email=_decode_text(email))
