# ==============================================
# Wire Primitives
# ==============================================
#
# PURPOSE:
#   Low-level byte encoding shared by the store header and by
#   persisted objects that encode their own fields.
#
# CLASSES:
# --------
# - DataStream
#     Append-only writer plus a read cursor over the same buffer.
#
#     Writers: write_bytes, write_compact_size, write_string,
#              write_uint8, write_int32, write_uint32,
#              write_int64, write_uint64
#     Readers: read_bytes, read_compact_size, read_string,
#              read_uint8, read_int32, read_uint32,
#              read_int64, read_uint64
#
# - SerializationError(ValueError)
#     Raised on short reads and malformed encodings.
#
# FUNCTIONS:
# ----------
# - checksum(data: bytes) -> bytes        → double SHA-256, 32 bytes
# - parse_env_tag(value) -> bytes         → normalize a 4-byte environment tag
#
# COMPACT SIZE:
# -------------
#   value < 0xfd          → 1 byte
#   value <= 0xffff       → 0xfd + uint16 LE
#   value <= 0xffffffff   → 0xfe + uint32 LE
#   otherwise             → 0xff + uint64 LE
#
# ==============================================

import hashlib
import struct
from typing import Union

CHECKSUM_SIZE = 32
ENV_TAG_SIZE = 4
MAX_COMPACT_SIZE = 0x02000000


class SerializationError(ValueError):
    """Raised when bytes cannot be decoded into the expected shape."""


def checksum(data: bytes) -> bytes:
    """Double SHA-256 of ``data``."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def parse_env_tag(value: Union[bytes, bytearray, str]) -> bytes:
    """
    Normalize an environment tag.

    Args:
        value: 4 raw bytes, or 8 hex digits (e.g. "aabbccdd")

    Returns:
        The 4-byte tag

    Raises:
        ValueError: If the value does not describe exactly 4 bytes
    """
    if isinstance(value, str):
        try:
            value = bytes.fromhex(value.strip())
        except ValueError:
            raise ValueError(f"Environment tag is not valid hex: {value!r}")
    tag = bytes(value)
    if len(tag) != ENV_TAG_SIZE:
        raise ValueError(
            f"Environment tag must be {ENV_TAG_SIZE} bytes, got {len(tag)}"
        )
    return tag


class DataStream:
    """
    A byte buffer with a read cursor.

    Writes always append to the end; reads consume from the cursor.
    """

    def __init__(self, data: bytes = b""):
        self._buffer = bytearray(data)
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def remaining(self) -> bytes:
        return bytes(self._buffer[self._cursor:])

    def eof(self) -> bool:
        return self._cursor >= len(self._buffer)

    # --- writers ---

    def write_bytes(self, data: bytes) -> None:
        self._buffer += data

    def write_compact_size(self, value: int) -> None:
        if value < 0:
            raise SerializationError(f"Negative compact size: {value}")
        if value < 0xfd:
            self._buffer += struct.pack("<B", value)
        elif value <= 0xffff:
            self._buffer += b"\xfd" + struct.pack("<H", value)
        elif value <= 0xffffffff:
            self._buffer += b"\xfe" + struct.pack("<I", value)
        else:
            self._buffer += b"\xff" + struct.pack("<Q", value)

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.write_compact_size(len(encoded))
        self.write_bytes(encoded)

    def write_uint8(self, value: int) -> None:
        self._pack("<B", value)

    def write_int32(self, value: int) -> None:
        self._pack("<i", value)

    def write_uint32(self, value: int) -> None:
        self._pack("<I", value)

    def write_int64(self, value: int) -> None:
        self._pack("<q", value)

    def write_uint64(self, value: int) -> None:
        self._pack("<Q", value)

    def _pack(self, fmt: str, value: int) -> None:
        try:
            self._buffer += struct.pack(fmt, value)
        except struct.error as e:
            raise SerializationError(f"Cannot encode {value!r} as {fmt}: {e}")

    # --- readers ---

    def read_bytes(self, size: int) -> bytes:
        end = self._cursor + size
        if size < 0 or end > len(self._buffer):
            raise SerializationError(
                f"Unexpected end of data: wanted {size} bytes, "
                f"{len(self._buffer) - self._cursor} available"
            )
        chunk = bytes(self._buffer[self._cursor:end])
        self._cursor = end
        return chunk

    def read_compact_size(self) -> int:
        marker = self.read_uint8()
        if marker < 0xfd:
            value, minimum = marker, 0
        elif marker == 0xfd:
            value, minimum = self._unpack("<H", 2), 0xfd
        elif marker == 0xfe:
            value, minimum = self._unpack("<I", 4), 0x10000
        else:
            value, minimum = self._unpack("<Q", 8), 0x100000000
        if value < minimum:
            raise SerializationError("Non-canonical compact size")
        if value > MAX_COMPACT_SIZE:
            raise SerializationError(f"Compact size too large: {value}")
        return value

    def read_string(self) -> str:
        raw = self.read_bytes(self.read_compact_size())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"Invalid UTF-8 string: {e}")

    def read_uint8(self) -> int:
        return self._unpack("<B", 1)

    def read_int32(self) -> int:
        return self._unpack("<i", 4)

    def read_uint32(self) -> int:
        return self._unpack("<I", 4)

    def read_int64(self) -> int:
        return self._unpack("<q", 8)

    def read_uint64(self) -> int:
        return self._unpack("<Q", 8)

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(fmt, self.read_bytes(size))[0]
