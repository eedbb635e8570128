"""
LedgerGate - Core Constants
=============================
Costanti immutabili del wire format e della validazione.

Security Level: CRITICAL
Version: 1.0.0

IMPORTANTE: modificare questi valori rompe l'interoperabilità del wire format.
"""

from typing import Final

# ============================================================================
# WIRE FORMAT
# ============================================================================

# Prefisso lunghezza stringhe: 1 byte
MAX_STRING_BYTES: Final[int] = 255

# Contatori input/output: 1 byte
MAX_INPUTS: Final[int] = 255
MAX_OUTPUTS: Final[int] = 255

# Numeri: uint64 big-endian
NUMBER_SIZE: Final[int] = 8
MAX_UINT64: Final[int] = 2**64 - 1

STRING_ENCODING: Final[str] = "utf-8"

# ============================================================================
# DIAGNOSTICS
# ============================================================================

# Valori sentinella di get_encoding_efficiency quando l'encoding fallisce
EFFICIENCY_FAILED_SIZE: Final[int] = -1
EFFICIENCY_FAILED_SAVINGS: Final[str] = "N/A"

# ============================================================================
# CRYPTO
# ============================================================================

SUPPORTED_CRYPTO_ALGORITHMS: Final[tuple] = ("ecdsa",)

__all__ = [
    "MAX_STRING_BYTES",
    "MAX_INPUTS",
    "MAX_OUTPUTS",
    "NUMBER_SIZE",
    "MAX_UINT64",
    "STRING_ENCODING",
    "EFFICIENCY_FAILED_SIZE",
    "EFFICIENCY_FAILED_SAVINGS",
    "SUPPORTED_CRYPTO_ALGORITHMS",
]
