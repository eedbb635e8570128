"""
LedgerGate - Utilities Package
================================
Serializzazione JSON/hex e primitive binarie del wire format.
"""

from ledger_gate.utils.serialization import (
    serialize_to_json,
    deserialize_from_json,
    bytes_to_hex,
    hex_to_bytes,
    write_string,
    write_number,
    write_count,
    BinaryReader,
)

__all__ = [
    # JSON / hex
    "serialize_to_json",
    "deserialize_from_json",
    "bytes_to_hex",
    "hex_to_bytes",

    # Binary
    "write_string",
    "write_number",
    "write_count",
    "BinaryReader",
]
