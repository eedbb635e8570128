"""
LedgerGate - UTXO Transaction Gate
====================================
Validazione transazioni UTXO e codec binario compatto.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Models
from ledger_gate.domain.models import (
    Transaction,
    TransactionInput,
    TransactionOutput,
    UTXOId,
    UTXO,
)

# Codec
from ledger_gate.domain.codec import (
    encode_transaction,
    decode_transaction,
    get_encoding_efficiency,
)

# Validation
from ledger_gate.domain.validation import (
    TransactionValidator,
    ValidationResult,
    ValidationErrorKind,
)
from ledger_gate.domain.utxo import UTXOPool
from ledger_gate.domain.crypto_core import ECDSAProvider, get_crypto_provider

# Services
from ledger_gate.services.transaction_service import TransactionBuilder, TransactionService

from ledger_gate.config import LedgerSettings, get_settings

__all__ = [
    # Version
    "__version__",

    # Models
    "Transaction",
    "TransactionInput",
    "TransactionOutput",
    "UTXOId",
    "UTXO",

    # Codec
    "encode_transaction",
    "decode_transaction",
    "get_encoding_efficiency",

    # Validation
    "TransactionValidator",
    "ValidationResult",
    "ValidationErrorKind",
    "UTXOPool",
    "ECDSAProvider",
    "get_crypto_provider",

    # Services
    "TransactionBuilder",
    "TransactionService",

    # Config
    "LedgerSettings",
    "get_settings",
]
