"""
LedgerGate - Binary Transaction Codec
=======================================
Wire format binario compatto delle transazioni.

Security Level: CRITICAL
Version: 1.0.0

Layout (big-endian, byte-exact):
    string(id) | uint64(timestamp)
    uint8(n_inputs)  | n x [string(txId) uint64(outputIndex) string(owner) string(signature)]
    uint8(n_outputs) | n x [uint64(amount) string(recipient)]

    string = uint8 lunghezza + byte UTF-8 (max 255)

Due implementazioni conformi DEVONO produrre byte identici per la stessa
transazione.
"""

from dataclasses import dataclass
from typing import List, Dict, Any

from ledger_gate.domain.models import (
    Transaction,
    TransactionInput,
    TransactionOutput,
    UTXOId,
)
from ledger_gate.constants import (
    MAX_INPUTS,
    MAX_OUTPUTS,
    EFFICIENCY_FAILED_SIZE,
    EFFICIENCY_FAILED_SAVINGS,
)
from ledger_gate.errors import (
    CodecError,
    TooManyInputsError,
    TooManyOutputsError,
    MalformedBinaryDataError,
)
from ledger_gate.utils.serialization import (
    BinaryReader,
    write_string,
    write_number,
    write_count,
    bytes_to_hex,
    hex_to_bytes,
)
from ledger_gate.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("codec")


# ============================================================================
# ENCODING
# ============================================================================

def _write_input(inp: TransactionInput, parts: List[bytes]) -> None:
    parts.append(write_string(inp.utxo_id.tx_id))
    parts.append(write_number(inp.utxo_id.output_index))
    parts.append(write_string(inp.owner))
    parts.append(write_string(inp.signature))


def _write_output(output: TransactionOutput, parts: List[bytes]) -> None:
    parts.append(write_number(output.amount))
    parts.append(write_string(output.recipient))


def encode_transaction(tx: Transaction) -> bytes:
    """
    Codifica una transazione nel wire format binario.

    Args:
        tx: Transaction da codificare

    Returns:
        bytes: Rappresentazione binaria

    Raises:
        StringTooLongError: Campo stringa oltre 255 byte UTF-8
        InvalidStringError: Campo stringa non codificabile in UTF-8
        InvalidNumberError: timestamp/outputIndex/amount fuori range uint64
        TooManyInputsError: Più di 255 input
        TooManyOutputsError: Più di 255 output

    Examples:
        >>> data = encode_transaction(Transaction("t", 1))
        >>> data.hex()
        '017400000000000000010000'
    """
    parts: List[bytes] = []

    parts.append(write_string(tx.id))
    parts.append(write_number(tx.timestamp))

    if len(tx.inputs) > MAX_INPUTS:
        raise TooManyInputsError(
            f"Too many inputs: {len(tx.inputs)} (max {MAX_INPUTS})",
            details={"count": len(tx.inputs), "max": MAX_INPUTS}
        )
    parts.append(write_count(len(tx.inputs)))
    for inp in tx.inputs:
        _write_input(inp, parts)

    if len(tx.outputs) > MAX_OUTPUTS:
        raise TooManyOutputsError(
            f"Too many outputs: {len(tx.outputs)} (max {MAX_OUTPUTS})",
            details={"count": len(tx.outputs), "max": MAX_OUTPUTS}
        )
    parts.append(write_count(len(tx.outputs)))
    for output in tx.outputs:
        _write_output(output, parts)

    return b"".join(parts)


def encode_transaction_hex(tx: Transaction) -> str:
    """encode_transaction in forma hex"""
    return bytes_to_hex(encode_transaction(tx))


# ============================================================================
# DECODING
# ============================================================================

def _read_input(reader: BinaryReader) -> TransactionInput:
    tx_id = reader.read_string()
    output_index = reader.read_number()
    owner = reader.read_string()
    signature = reader.read_string()
    return TransactionInput(
        utxo_id=UTXOId(tx_id, output_index),
        owner=owner,
        signature=signature,
    )


def _read_output(reader: BinaryReader) -> TransactionOutput:
    amount = reader.read_number()
    recipient = reader.read_string()
    return TransactionOutput(amount=amount, recipient=recipient)


def decode_transaction(data: bytes, strict: bool = True) -> Transaction:
    """
    Decodifica una transazione dal wire format binario.

    Inverso stretto di encode_transaction: stesso ordine campi, cursore
    esplicito. Non restituisce mai transazioni parzialmente popolate.

    Args:
        data: Buffer binario
        strict: Se True, byte in eccesso dopo l'ultimo output sono un errore

    Returns:
        Transaction: Transazione ricostruita

    Raises:
        MalformedBinaryDataError: Buffer troncato, UTF-8 invalido o
            (strict) byte in eccesso
    """
    reader = BinaryReader(data)

    tx_id = reader.read_string()
    timestamp = reader.read_number()

    input_count = reader.read_count()
    inputs = [_read_input(reader) for _ in range(input_count)]

    output_count = reader.read_count()
    outputs = [_read_output(reader) for _ in range(output_count)]

    if strict and not reader.at_end():
        raise MalformedBinaryDataError(
            f"Trailing data after transaction: {reader.remaining()} bytes",
            details={"offset": reader.offset, "trailing": reader.remaining()}
        )

    return Transaction(id=tx_id, timestamp=timestamp, inputs=inputs, outputs=outputs)


def decode_transaction_hex(hex_str: str, strict: bool = True) -> Transaction:
    """
    decode_transaction da stringa hex.

    Raises:
        MalformedBinaryDataError: Hex invalido o buffer malformato
    """
    try:
        data = hex_to_bytes(hex_str)
    except ValueError as e:
        raise MalformedBinaryDataError(str(e), details={"input": hex_str[:32]})
    return decode_transaction(data, strict=strict)


# ============================================================================
# ENCODING EFFICIENCY (diagnostic)
# ============================================================================

@dataclass(frozen=True)
class EncodingEfficiency:
    """
    Confronto dimensioni JSON vs binario.

    Attributes:
        json_size (int): Byte del JSON compatto
        binary_size (int): Byte del wire format (-1 se l'encoding fallisce)
        savings (str): Risparmio percentuale ("42.1%") o "N/A"
    """

    json_size: int
    binary_size: int
    savings: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonSize": self.json_size,
            "binarySize": self.binary_size,
            "savings": self.savings,
        }


def get_encoding_efficiency(tx: Transaction) -> EncodingEfficiency:
    """
    Confronta la dimensione JSON e binaria di una transazione.

    Diagnostica: un errore di encoding NON viene propagato ma riportato
    come binary_size=-1, savings="N/A".

    Examples:
        >>> eff = get_encoding_efficiency(Transaction("t", 1))
        >>> eff.binary_size
        12
    """
    # surrogatepass: la misura non deve fallire su stringhe non codificabili
    json_size = len(tx.to_json().encode("utf-8", "surrogatepass"))

    try:
        binary_size = len(encode_transaction(tx))
    except CodecError as e:
        logger.warning(
            "Encoding efficiency unavailable: transaction not encodable",
            extra_data={"tx_id": tx.id[:16], "error": e.code}
        )
        return EncodingEfficiency(
            json_size=json_size,
            binary_size=EFFICIENCY_FAILED_SIZE,
            savings=EFFICIENCY_FAILED_SAVINGS,
        )

    savings_percent = (json_size - binary_size) / json_size * 100
    return EncodingEfficiency(
        json_size=json_size,
        binary_size=binary_size,
        savings=f"{savings_percent:.1f}%",
    )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "encode_transaction",
    "encode_transaction_hex",
    "decode_transaction",
    "decode_transaction_hex",
    "EncodingEfficiency",
    "get_encoding_efficiency",
]
