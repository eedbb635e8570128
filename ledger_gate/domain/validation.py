"""
LedgerGate - Transaction Validation
=====================================
Decide l'ammissibilità di una singola transazione rispetto allo store UTXO.

Security Level: CRITICAL
Version: 1.0.0

Validation Rules (tutte eseguite, nessuna interrompe le successive):
1. Struttura: almeno un input e un output
2. Per input: UTXO esistente, amount UTXO positivo, firma valida,
   nessun UTXO referenziato due volte nella stessa transazione
3. Balance: output positivi, somma input == somma output

I findings non sono eccezioni: vengono raccolti in ValidationResult.errors,
così il chiamante vede ogni motivo di rifiuto e non solo il primo.

IMPORTANTE: la validazione non muta mai transazione o store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Set, Dict, Any, Optional

from ledger_gate.domain.models import (
    Transaction,
    TransactionInput,
    create_signing_payload,
)
from ledger_gate.domain.utxo import UTXOStore
from ledger_gate.domain.crypto_core import SignatureVerifier
from ledger_gate.logging_setup import get_logger, PerformanceLogger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("validation")


# ============================================================================
# RESULT TYPES
# ============================================================================

class ValidationErrorKind(str, Enum):
    """Codici errore stabili (il messaggio non fa parte del contratto)"""
    EMPTY_INPUTS = "EmptyInputs"
    EMPTY_OUTPUTS = "EmptyOutputs"
    UTXO_NOT_FOUND = "UtxoNotFound"
    NEGATIVE_AMOUNT = "NegativeAmount"
    INVALID_SIGNATURE = "InvalidSignature"
    DOUBLE_SPENDING = "DoubleSpending"
    AMOUNT_MISMATCH = "AmountMismatch"


@dataclass(frozen=True)
class ValidationError:
    """
    Singolo motivo di rifiuto.

    Attributes:
        kind (ValidationErrorKind): Codice errore
        message (str): Descrizione con valori di contesto
    """

    kind: ValidationErrorKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """
    Esito della validazione.

    valid è True se e solo se errors è vuoto.

    Examples:
        >>> ValidationResult.from_errors([]).valid
        True
    """

    valid: bool
    errors: List[ValidationError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[ValidationError]) -> "ValidationResult":
        return cls(valid=len(errors) == 0, errors=list(errors))

    def kinds(self) -> List[ValidationErrorKind]:
        """Codici errore in ordine di emissione"""
        return [error.kind for error in self.errors]

    def has(self, kind: ValidationErrorKind) -> bool:
        return kind in self.kinds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
        }


def create_validation_error(kind: ValidationErrorKind, message: str) -> ValidationError:
    return ValidationError(kind=kind, message=message)


# ============================================================================
# TRANSACTION VALIDATOR
# ============================================================================

class TransactionValidator:
    """
    Validatore transazioni.

    Attributes:
        utxo_store: Vista read-only dello store (get_utxo)
        verifier: Primitiva di verifica firme (verify)
        slow_threshold_ms: Soglia per loggare validazioni lente

    Examples:
        >>> from ledger_gate.domain.utxo import UTXOPool
        >>> from ledger_gate.domain.crypto_core import ECDSAProvider
        >>> validator = TransactionValidator(UTXOPool(), ECDSAProvider())
        >>> result = validator.validate_transaction(Transaction("t", 1))
        >>> [kind.value for kind in result.kinds()]
        ['EmptyInputs', 'EmptyOutputs']
    """

    def __init__(
        self,
        utxo_store: UTXOStore,
        verifier: SignatureVerifier,
        slow_threshold_ms: Optional[float] = None
    ):
        self.utxo_store = utxo_store
        self.verifier = verifier
        self.slow_threshold_ms = slow_threshold_ms

    def validate_transaction(self, tx: Transaction) -> ValidationResult:
        """
        Validazione completa transazione.

        Args:
            tx: Transaction da validare

        Returns:
            ValidationResult: valid + lista ordinata di tutti gli errori
        """
        with PerformanceLogger(logger, "validate_transaction", self.slow_threshold_ms):
            errors: List[ValidationError] = []

            errors.extend(self._validate_non_empty(tx))

            inputs_total = self._validate_inputs(tx, errors)

            errors.extend(self._validate_balance(inputs_total, tx))

            result = ValidationResult.from_errors(errors)

        if result.valid:
            logger.debug("Transaction validated", extra_data={"tx_id": tx.id[:16]})
        else:
            logger.info(
                "Transaction rejected",
                extra_data={
                    "tx_id": tx.id[:16],
                    "errors": [kind.value for kind in result.kinds()],
                }
            )

        return result

    def _validate_non_empty(self, tx: Transaction) -> List[ValidationError]:
        """Almeno un input e un output"""
        errors = []
        if not tx.inputs:
            errors.append(create_validation_error(
                ValidationErrorKind.EMPTY_INPUTS,
                "Transaction has no inputs"
            ))
        if not tx.outputs:
            errors.append(create_validation_error(
                ValidationErrorKind.EMPTY_OUTPUTS,
                "Transaction has no outputs"
            ))
        return errors

    def _validate_inputs(self, tx: Transaction, errors: List[ValidationError]) -> int:
        """
        Passata per input. Ritorna la somma degli amount degli UTXO trovati.

        Un UTXO con amount <= 0 viene segnalato ma sommato comunque.
        """
        inputs_total = 0
        seen_utxos: Set[str] = set()
        signing_payload: Optional[str] = None

        for inp in tx.inputs:
            utxo = self.utxo_store.get_utxo(inp.utxo_id.tx_id, inp.utxo_id.output_index)

            if utxo is None:
                errors.append(create_validation_error(
                    ValidationErrorKind.UTXO_NOT_FOUND,
                    f"UTXO not found: {inp.utxo_id.key}"
                ))
                continue

            if utxo.amount <= 0:
                errors.append(create_validation_error(
                    ValidationErrorKind.NEGATIVE_AMOUNT,
                    f"UTXO amount must be positive: {inp.utxo_id.key} has {utxo.amount}"
                ))

            inputs_total += utxo.amount

            if signing_payload is None:
                signing_payload = create_signing_payload(tx)
            self._validate_input_signature(signing_payload, inp, errors)

            self._validate_double_spending(inp, seen_utxos, errors)

        return inputs_total

    def _validate_input_signature(
        self,
        signing_payload: str,
        inp: TransactionInput,
        errors: List[ValidationError]
    ) -> None:
        """Firma dell'owner sul payload senza firme"""
        if not self.verifier.verify(signing_payload, inp.signature, inp.owner):
            errors.append(create_validation_error(
                ValidationErrorKind.INVALID_SIGNATURE,
                f"Invalid signature for input {inp.utxo_id.key} (owner {inp.owner[:16]})"
            ))

    def _validate_double_spending(
        self,
        inp: TransactionInput,
        seen_utxos: Set[str],
        errors: List[ValidationError]
    ) -> None:
        """Stesso UTXO referenziato più volte nella stessa transazione"""
        utxo_key = inp.utxo_id.key
        if utxo_key in seen_utxos:
            errors.append(create_validation_error(
                ValidationErrorKind.DOUBLE_SPENDING,
                f"UTXO referenced multiple times within the same transaction: {utxo_key}"
            ))
        else:
            seen_utxos.add(utxo_key)

    def _validate_balance(self, inputs_total: int, tx: Transaction) -> List[ValidationError]:
        """Output positivi e somma input == somma output"""
        errors = []
        outputs_total = 0

        for idx, output in enumerate(tx.outputs):
            if output.amount <= 0:
                errors.append(create_validation_error(
                    ValidationErrorKind.NEGATIVE_AMOUNT,
                    f"Output amount must be positive: output {idx} has {output.amount}"
                ))
            outputs_total += output.amount

        if inputs_total != outputs_total:
            errors.append(create_validation_error(
                ValidationErrorKind.AMOUNT_MISMATCH,
                f"Amount mismatch: inputs {inputs_total} != outputs {outputs_total}"
            ))

        return errors


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ValidationErrorKind",
    "ValidationError",
    "ValidationResult",
    "create_validation_error",
    "TransactionValidator",
]
