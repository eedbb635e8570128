"""
LedgerGate - Serialization Utilities
======================================
JSON helpers and the length-prefixed big-endian binary primitives
used by the transaction codec.
"""

import json
import struct
from typing import Any, Optional

from ledger_gate.constants import (
    MAX_STRING_BYTES,
    MAX_UINT64,
    NUMBER_SIZE,
    STRING_ENCODING,
)
from ledger_gate.errors import (
    StringTooLongError,
    InvalidStringError,
    InvalidNumberError,
    MalformedBinaryDataError,
)
from ledger_gate.logging_setup import get_logger

logger = get_logger("utils.serialization")


_UINT64 = struct.Struct('>Q')
_UINT8 = struct.Struct('>B')


# ============================================================================
# JSON SERIALIZATION
# ============================================================================

def serialize_to_json(obj: Any, indent: Optional[int] = None) -> str:
    """
    Serialize object to JSON string.

    Compact separators and raw (non-escaped) unicode, so that the output is
    byte-identical to a JavaScript ``JSON.stringify`` of the same structure.
    Objects exposing ``to_dict()`` are serialized through it.

    Args:
        obj: Object to serialize
        indent: JSON indentation (None = compact)

    Returns:
        str: JSON string
    """
    def default_handler(o):
        if isinstance(o, bytes):
            return o.hex()
        elif hasattr(o, 'to_dict'):
            return o.to_dict()
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")

    separators = None if indent is not None else (',', ':')

    try:
        return json.dumps(
            obj,
            default=default_handler,
            indent=indent,
            separators=separators,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        logger.error(f"Serialization failed: {e}")
        raise


def deserialize_from_json(json_str: str) -> Any:
    """
    Deserialize JSON string to Python object.

    Raises:
        json.JSONDecodeError: If the string is not valid JSON
    """
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"Deserialization failed: {e}")
        raise


# ============================================================================
# BYTES/HEX CONVERSION
# ============================================================================

def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hex string.

    Examples:
        >>> bytes_to_hex(b"\\x00\\x01\\x02")
        '000102'
    """
    return data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.

    Raises:
        ValueError: If invalid hex string

    Examples:
        >>> hex_to_bytes('000102')
        b'\\x00\\x01\\x02'
    """
    try:
        return bytes.fromhex(hex_str.strip())
    except ValueError as e:
        logger.error(f"Invalid hex string: {hex_str[:32]}")
        raise ValueError(f"Invalid hex string: {e}")


# ============================================================================
# BINARY WRITERS
# ============================================================================

def write_string(value: str) -> bytes:
    """
    Encode a string as 1 length byte followed by its UTF-8 bytes.

    Raises:
        StringTooLongError: If the UTF-8 form exceeds 255 bytes
        InvalidStringError: If the string has no UTF-8 form (lone surrogates)

    Examples:
        >>> write_string("abc")
        b'\\x03abc'
    """
    try:
        data = value.encode(STRING_ENCODING)
    except UnicodeEncodeError as e:
        raise InvalidStringError(
            f"String is not encodable as UTF-8: {e.reason}",
            details={"position": e.start}
        )
    if len(data) > MAX_STRING_BYTES:
        raise StringTooLongError(
            f"String too long: {len(data)} bytes (max {MAX_STRING_BYTES})",
            details={"length": len(data), "max": MAX_STRING_BYTES}
        )
    return _UINT8.pack(len(data)) + data


def write_number(value: int) -> bytes:
    """
    Encode a non-negative integer as exactly 8 bytes, unsigned big-endian.

    Raises:
        InvalidNumberError: If value is not an int, is negative, or does not
            fit in 64 bits

    Examples:
        >>> write_number(1)
        b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    # bool is an int subclass but never a valid wire number
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidNumberError(
            f"Number must be an integer, got {type(value).__name__}: {value!r}",
            details={"value": repr(value)}
        )
    if value < 0 or value > MAX_UINT64:
        raise InvalidNumberError(
            f"Number out of uint64 range: {value}",
            details={"value": value}
        )
    return _UINT64.pack(value)


def write_count(count: int) -> bytes:
    """Encode a 0..255 element count as a single byte."""
    return _UINT8.pack(count)


# ============================================================================
# BINARY READER
# ============================================================================

class BinaryReader:
    """
    Cursor over a byte buffer.

    Every read advances the cursor by exactly the number of bytes the matching
    writer produced; reading past the end raises MalformedBinaryDataError.

    Examples:
        >>> reader = BinaryReader(write_string("hi") + write_number(7))
        >>> reader.read_string(), reader.read_number()
        ('hi', 7)
        >>> reader.at_end()
        True
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    def remaining(self) -> int:
        return len(self._data) - self._offset

    def at_end(self) -> bool:
        return self._offset == len(self._data)

    def read_bytes(self, length: int) -> bytes:
        end = self._offset + length
        if end > len(self._data):
            raise MalformedBinaryDataError(
                f"Unexpected end of data: need {length} bytes at offset "
                f"{self._offset}, {self.remaining()} available",
                details={
                    "offset": self._offset,
                    "needed": length,
                    "available": self.remaining(),
                }
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def read_count(self) -> int:
        return _UINT8.unpack(self.read_bytes(1))[0]

    def read_number(self) -> int:
        return _UINT64.unpack(self.read_bytes(NUMBER_SIZE))[0]

    def read_string(self) -> str:
        start = self._offset
        length = self.read_count()
        raw = self.read_bytes(length)
        try:
            return raw.decode(STRING_ENCODING)
        except UnicodeDecodeError as e:
            raise MalformedBinaryDataError(
                f"Invalid UTF-8 string at offset {start}: {e.reason}",
                details={"offset": start, "length": length}
            )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "serialize_to_json",
    "deserialize_from_json",
    "bytes_to_hex",
    "hex_to_bytes",
    "write_string",
    "write_number",
    "write_count",
    "BinaryReader",
]
