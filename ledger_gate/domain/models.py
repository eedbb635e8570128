"""
LedgerGate - Core Domain Models
=================================
Strutture dati fondamentali del ledger UTXO.

Security Level: CRITICAL
Version: 1.0.0

Models:
- UTXOId: Riferimento a un output (tx_id + output_index)
- TransactionInput: Input (UTXO speso + owner + firma)
- TransactionOutput: Output (amount + recipient)
- Transaction: Transazione completa
- UTXO: Output non speso posseduto dallo store
- UnsignedTransaction: Proiezione senza firme, usata come messaggio firmato

Le strutture sono immutabili (frozen). Gli amount NON sono validati in
costruzione: è compito del TransactionValidator segnalarli.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any

from ledger_gate.errors import MalformedTransactionError
from ledger_gate.utils.serialization import serialize_to_json


# ============================================================================
# HELPERS
# ============================================================================

def _require(data: Any, key: str, expected: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedTransactionError(
            f"{where} must be an object, got {type(data).__name__}",
            code="INVALID_JSON_SHAPE",
            details={"where": where}
        )
    if key not in data:
        raise MalformedTransactionError(
            f"{where} missing field '{key}'",
            code="MISSING_FIELD",
            details={"where": where, "field": key}
        )
    value = data[key]
    # bool è sottoclasse di int ma non è mai un numero valido
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise MalformedTransactionError(
            f"{where}.{key} must be {expected.__name__}, got {type(value).__name__}",
            code="INVALID_FIELD_TYPE",
            details={"where": where, "field": key}
        )
    return value


# ============================================================================
# UTXO ID
# ============================================================================

@dataclass(frozen=True, order=True)
class UTXOId:
    """
    Chiave univoca di un UTXO.

    Attributes:
        tx_id (str): ID della transazione che ha creato l'output
        output_index (int): Indice dell'output in quella transazione

    Examples:
        >>> utxo_id = UTXOId("tx1", 0)
        >>> utxo_id.key
        'tx1:0'
    """

    tx_id: str
    output_index: int

    @property
    def key(self) -> str:
        """Forma canonica "tx_id:output_index" usata come chiave di mapping"""
        return f"{self.tx_id}:{self.output_index}"

    def to_dict(self) -> Dict[str, Any]:
        return {"txId": self.tx_id, "outputIndex": self.output_index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UTXOId:
        return cls(
            tx_id=_require(data, "txId", str, "utxoId"),
            output_index=_require(data, "outputIndex", int, "utxoId"),
        )

    def __str__(self) -> str:
        return self.key


def get_utxo_key(utxo_id: UTXOId) -> str:
    """Chiave canonica di un UTXOId"""
    return utxo_id.key


# ============================================================================
# TRANSACTION OUTPUT
# ============================================================================

@dataclass(frozen=True)
class TransactionOutput:
    """
    Output di transazione.

    Attributes:
        amount (int): Quantità trasferita (deve essere > 0, verificato dal validator)
        recipient (str): Identità destinataria
    """

    amount: int
    recipient: str

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "recipient": self.recipient}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TransactionOutput:
        return cls(
            amount=_require(data, "amount", int, "output"),
            recipient=_require(data, "recipient", str, "output"),
        )


# ============================================================================
# TRANSACTION INPUT
# ============================================================================

@dataclass(frozen=True)
class TransactionInput:
    """
    Input di transazione: spende un UTXO e prova l'autorizzazione.

    Attributes:
        utxo_id (UTXOId): UTXO speso
        owner (str): Identità (public key) che firma
        signature (str): Firma di owner sul payload firmabile della transazione

    Examples:
        >>> inp = TransactionInput(UTXOId("tx1", 0), owner="02ab...", signature="")
        >>> inp.utxo_id.key
        'tx1:0'
    """

    utxo_id: UTXOId
    owner: str
    signature: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "utxoId": self.utxo_id.to_dict(),
            "owner": self.owner,
            "signature": self.signature,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TransactionInput:
        return cls(
            utxo_id=UTXOId.from_dict(_require(data, "utxoId", dict, "input")),
            owner=_require(data, "owner", str, "input"),
            signature=_require(data, "signature", str, "input"),
        )


# ============================================================================
# TRANSACTION
# ============================================================================

@dataclass(frozen=True)
class Transaction:
    """
    Transazione del ledger.

    L'ordine di inputs/outputs è significativo per il codec (deve
    sopravvivere al round-trip) ma non per la validazione.

    Attributes:
        id (str): ID transazione
        timestamp (int): Unix timestamp
        inputs (List[TransactionInput]): Input ordinati
        outputs (List[TransactionOutput]): Output ordinati

    Examples:
        >>> tx = Transaction(
        ...     id="tx2",
        ...     timestamp=1700000000,
        ...     inputs=[TransactionInput(UTXOId("tx1", 0), "alice", "sig")],
        ...     outputs=[TransactionOutput(100, "bob")],
        ... )
        >>> tx.total_output_amount()
        100
    """

    id: str
    timestamp: int
    inputs: List[TransactionInput] = field(default_factory=list)
    outputs: List[TransactionOutput] = field(default_factory=list)

    def total_output_amount(self) -> int:
        """Somma amount output (inclusi eventuali amount non positivi)"""
        return sum(output.amount for output in self.outputs)

    def unsigned(self) -> UnsignedTransaction:
        """Proiezione senza firme (messaggio da firmare/verificare)"""
        return UnsignedTransaction.from_transaction(self)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializza in dict con le chiavi camelCase della forma JSON.

        Examples:
            >>> Transaction("t", 1).to_dict()
            {'id': 't', 'timestamp': 1, 'inputs': [], 'outputs': []}
        """
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "inputs": [inp.to_dict() for inp in self.inputs],
            "outputs": [out.to_dict() for out in self.outputs],
        }

    def to_json(self) -> str:
        """JSON compatto (usato anche come riferimento per l'efficienza)"""
        return serialize_to_json(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Transaction:
        """
        Deserializza da dict.

        Raises:
            MalformedTransactionError: Campi mancanti o di tipo errato
        """
        inputs = _require(data, "inputs", list, "transaction")
        outputs = _require(data, "outputs", list, "transaction")
        return cls(
            id=_require(data, "id", str, "transaction"),
            timestamp=_require(data, "timestamp", int, "transaction"),
            inputs=[TransactionInput.from_dict(inp) for inp in inputs],
            outputs=[TransactionOutput.from_dict(out) for out in outputs],
        )

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self.id[:16]}, "
            f"inputs={len(self.inputs)}, "
            f"outputs={len(self.outputs)})"
        )


# ============================================================================
# UNSIGNED PROJECTION
# ============================================================================

@dataclass(frozen=True)
class UnsignedInput:
    """Input senza firma"""

    utxo_id: UTXOId
    owner: str

    def to_dict(self) -> Dict[str, Any]:
        return {"utxoId": self.utxo_id.to_dict(), "owner": self.owner}


@dataclass(frozen=True)
class UnsignedTransaction:
    """
    Proiezione della transazione senza firme.

    Una firma non può firmare se stessa: il messaggio firmato esclude il
    campo signature di ogni input. Ordine chiavi del JSON:
    id, inputs, outputs, timestamp.
    """

    id: str
    inputs: List[UnsignedInput]
    outputs: List[TransactionOutput]
    timestamp: int

    @classmethod
    def from_transaction(cls, tx: Transaction) -> UnsignedTransaction:
        return cls(
            id=tx.id,
            inputs=[UnsignedInput(inp.utxo_id, inp.owner) for inp in tx.inputs],
            outputs=list(tx.outputs),
            timestamp=tx.timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "inputs": [inp.to_dict() for inp in self.inputs],
            "outputs": [out.to_dict() for out in self.outputs],
            "timestamp": self.timestamp,
        }

    def signing_payload(self) -> str:
        """Stringa deterministica usata come messaggio di firma"""
        return serialize_to_json(self.to_dict())


def create_signing_payload(tx: Transaction) -> str:
    """
    Payload firmabile di una transazione.

    Examples:
        >>> tx = Transaction("t", 5, [TransactionInput(UTXOId("p", 0), "a", "sig")], [])
        >>> create_signing_payload(tx)
        '{"id":"t","inputs":[{"utxoId":{"txId":"p","outputIndex":0},"owner":"a"}],"outputs":[],"timestamp":5}'
    """
    return tx.unsigned().signing_payload()


# ============================================================================
# UTXO
# ============================================================================

@dataclass(frozen=True)
class UTXO:
    """
    Output non speso, posseduto dallo store (mai mutato dal core).

    Attributes:
        utxo_id (UTXOId): Riferimento di origine
        amount (int): Quantità
        recipient (str): Identità proprietaria
    """

    utxo_id: UTXOId
    amount: int
    recipient: str

    @property
    def owner(self) -> str:
        return self.recipient

    def to_dict(self) -> Dict[str, Any]:
        return {
            "utxoId": self.utxo_id.to_dict(),
            "amount": self.amount,
            "recipient": self.recipient,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UTXO:
        return cls(
            utxo_id=UTXOId.from_dict(_require(data, "utxoId", dict, "utxo")),
            amount=_require(data, "amount", int, "utxo"),
            recipient=_require(data, "recipient", str, "utxo"),
        )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "UTXOId",
    "get_utxo_key",
    "TransactionInput",
    "TransactionOutput",
    "Transaction",
    "UnsignedInput",
    "UnsignedTransaction",
    "create_signing_payload",
    "UTXO",
]
