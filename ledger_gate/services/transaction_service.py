"""
LedgerGate - Transaction Service
==================================
Servizio high-level attorno a codec e validator.

Security Level: HIGH
Version: 1.0.0

Features:
- Costruzione e firma transazioni (TransactionBuilder)
- Ingresso da wire format: decode → validate → commit
- Commit solo se ValidationResult.valid
- Validate-then-commit serializzato (lock)
"""

from typing import List, Optional, Tuple
import threading
import time

from ledger_gate.domain.models import (
    Transaction,
    TransactionInput,
    TransactionOutput,
    UTXOId,
    create_signing_payload,
)
from ledger_gate.domain.codec import encode_transaction, decode_transaction
from ledger_gate.domain.crypto_core import CryptoProvider, SignatureVerifier
from ledger_gate.domain.utxo import UTXOStore
from ledger_gate.domain.validation import TransactionValidator, ValidationResult
from ledger_gate.config import LedgerSettings
from ledger_gate.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("transaction_service")


# ============================================================================
# TRANSACTION BUILDER
# ============================================================================

class TransactionBuilder:
    """
    Costruisce e firma una transazione.

    Ogni input viene firmato sul payload senza firme della transazione
    completa, quindi la firma avviene solo in build().

    Examples:
        >>> provider = ECDSAProvider()
        >>> priv, pub = provider.generate_keypair()
        >>> tx = (
        ...     TransactionBuilder(provider, tx_id="tx2", timestamp=1700000000)
        ...     .add_input(UTXOId("tx1", 0), priv)
        ...     .add_output(100, "bob")
        ...     .build()
        ... )
        >>> tx.inputs[0].owner == pub
        True
    """

    def __init__(
        self,
        signer: CryptoProvider,
        tx_id: Optional[str] = None,
        timestamp: Optional[int] = None
    ):
        self.signer = signer
        self.tx_id = tx_id
        self.timestamp = timestamp
        self._inputs: List[Tuple[UTXOId, str]] = []
        self._outputs: List[TransactionOutput] = []

    def with_id(self, tx_id: str) -> "TransactionBuilder":
        self.tx_id = tx_id
        return self

    def with_timestamp(self, timestamp: int) -> "TransactionBuilder":
        self.timestamp = timestamp
        return self

    def add_input(self, utxo_id: UTXOId, private_key: str) -> "TransactionBuilder":
        self._inputs.append((utxo_id, private_key))
        return self

    def add_output(self, amount: int, recipient: str) -> "TransactionBuilder":
        self._outputs.append(TransactionOutput(amount=amount, recipient=recipient))
        return self

    def build(self) -> Transaction:
        """
        Assembla e firma.

        Se id/timestamp non sono impostati: timestamp = ora corrente,
        id = "tx-<timestamp>-<n_inputs>-<n_outputs>".
        """
        timestamp = self.timestamp if self.timestamp is not None else int(time.time())
        tx_id = self.tx_id or f"tx-{timestamp}-{len(self._inputs)}-{len(self._outputs)}"

        unsigned_inputs = [
            TransactionInput(utxo_id, self.signer.public_key_from_private(private_key), "")
            for utxo_id, private_key in self._inputs
        ]
        unsigned = Transaction(
            id=tx_id,
            timestamp=timestamp,
            inputs=unsigned_inputs,
            outputs=list(self._outputs),
        )

        payload = create_signing_payload(unsigned)
        signed_inputs = [
            TransactionInput(inp.utxo_id, inp.owner, self.signer.sign(payload, private_key))
            for inp, (_, private_key) in zip(unsigned_inputs, self._inputs)
        ]

        return Transaction(
            id=tx_id,
            timestamp=timestamp,
            inputs=signed_inputs,
            outputs=list(self._outputs),
        )


# ============================================================================
# TRANSACTION SERVICE
# ============================================================================

class TransactionService:
    """
    Flusso chiamante: decode → validate → commit / reject → encode.

    Attributes:
        utxo_store: Store UTXO (deve esporre apply_transaction per il commit)
        validator: TransactionValidator sullo stesso store
        config: Configurazione

    Examples:
        >>> service = TransactionService(pool, ECDSAProvider(), config)
        >>> result = service.submit(tx)
        >>> result.valid
        True
    """

    def __init__(
        self,
        utxo_store: UTXOStore,
        verifier: SignatureVerifier,
        config: LedgerSettings
    ):
        self.utxo_store = utxo_store
        self.config = config
        self.validator = TransactionValidator(
            utxo_store,
            verifier,
            slow_threshold_ms=config.validation_slow_threshold_ms,
        )
        self._commit_lock = threading.Lock()

    def validate(self, tx: Transaction) -> ValidationResult:
        """Validazione senza commit"""
        return self.validator.validate_transaction(tx)

    def submit(self, tx: Transaction) -> ValidationResult:
        """
        Valida e, se valida, applica la transazione allo store.

        Validazione e commit avvengono sotto lo stesso lock: due transazioni
        che spendono lo stesso UTXO non possono essere entrambe ammesse.

        Raises:
            TypeError: Se lo store non supporta apply_transaction
        """
        apply = getattr(self.utxo_store, "apply_transaction", None)
        if apply is None:
            raise TypeError(
                f"{type(self.utxo_store).__name__} does not support apply_transaction"
            )

        with self._commit_lock:
            result = self.validator.validate_transaction(tx)
            if result.valid:
                apply(tx)
                logger.info("Transaction admitted", extra_data={"tx_id": tx.id[:16]})

        return result

    def ingest(self, data: bytes) -> Tuple[Transaction, ValidationResult]:
        """
        Decodifica dal wire format e sottomette.

        Raises:
            MalformedBinaryDataError: Buffer non decodificabile
        """
        tx = decode_transaction(data, strict=self.config.strict_decoding)
        return tx, self.submit(tx)

    def encode(self, tx: Transaction) -> bytes:
        """Wire format per storage/trasmissione"""
        return encode_transaction(tx)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "TransactionBuilder",
    "TransactionService",
]
