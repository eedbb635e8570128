"""
LedgerGate - Domain Package
=============================
Modelli, codec, store UTXO e validazione.
"""

# Models
from ledger_gate.domain.models import (
    Transaction,
    TransactionInput,
    TransactionOutput,
    UTXOId,
    UTXO,
    UnsignedTransaction,
    create_signing_payload,
    get_utxo_key,
)

# Codec
from ledger_gate.domain.codec import (
    encode_transaction,
    encode_transaction_hex,
    decode_transaction,
    decode_transaction_hex,
    EncodingEfficiency,
    get_encoding_efficiency,
)

# UTXO
from ledger_gate.domain.utxo import UTXOStore, UTXOPool

# Validation
from ledger_gate.domain.validation import (
    TransactionValidator,
    ValidationError,
    ValidationErrorKind,
    ValidationResult,
)

# Crypto
from ledger_gate.domain.crypto_core import (
    SignatureVerifier,
    CryptoProvider,
    ECDSAProvider,
    get_crypto_provider,
)


__all__ = [
    # Models
    "Transaction",
    "TransactionInput",
    "TransactionOutput",
    "UTXOId",
    "UTXO",
    "UnsignedTransaction",
    "create_signing_payload",
    "get_utxo_key",

    # Codec
    "encode_transaction",
    "encode_transaction_hex",
    "decode_transaction",
    "decode_transaction_hex",
    "EncodingEfficiency",
    "get_encoding_efficiency",

    # UTXO
    "UTXOStore",
    "UTXOPool",

    # Validation
    "TransactionValidator",
    "ValidationError",
    "ValidationErrorKind",
    "ValidationResult",

    # Crypto
    "SignatureVerifier",
    "CryptoProvider",
    "ECDSAProvider",
    "get_crypto_provider",
]
