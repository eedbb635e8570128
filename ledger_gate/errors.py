"""
LedgerGate - Custom Exceptions
================================
Gerarchia di eccezioni per gli errori "hard" (codec, configurazione, store).

I findings di validazione NON sono eccezioni: vedi
ledger_gate.domain.validation.ValidationResult.

Security Level: HIGH
Version: 1.0.0
"""

from typing import Optional, Any


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class LedgerGateException(Exception):
    """
    Eccezione base per tutte le eccezioni LedgerGate.

    Attributes:
        message (str): Messaggio errore
        code (str): Codice errore stabile (es. "STRING_TOO_LONG")
        details (dict): Dettagli aggiuntivi
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serializza eccezione per CLI/logging"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================================
# CONFIGURATION ERRORS
# ============================================================================

class ConfigError(LedgerGateException):
    """Errore configurazione sistema"""
    pass


# ============================================================================
# CODEC ERRORS
# ============================================================================

class CodecError(LedgerGateException):
    """Errore codec binario (base)"""
    pass


class StringTooLongError(CodecError):
    """Stringa oltre 255 byte UTF-8"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "STRING_TOO_LONG", details)


class InvalidStringError(CodecError):
    """Stringa non codificabile in UTF-8 (es. surrogate isolato)"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "INVALID_STRING", details)


class InvalidNumberError(CodecError):
    """Numero non rappresentabile come uint64"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "INVALID_NUMBER", details)


class TooManyInputsError(CodecError):
    """Più di 255 input"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "TOO_MANY_INPUTS", details)


class TooManyOutputsError(CodecError):
    """Più di 255 output"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "TOO_MANY_OUTPUTS", details)


class MalformedBinaryDataError(CodecError):
    """Buffer troncato o corrotto in decodifica"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code or "MALFORMED_BINARY_DATA", details)


# ============================================================================
# MODEL ERRORS
# ============================================================================

class MalformedTransactionError(LedgerGateException):
    """Forma JSON/dict della transazione invalida"""
    pass


# ============================================================================
# UTXO ERRORS
# ============================================================================

class UTXOError(LedgerGateException):
    """Errore UTXO pool"""
    pass


class UTXONotFoundError(UTXOError):
    """UTXO non trovato"""
    pass


# ============================================================================
# CRYPTOGRAPHY ERRORS
# ============================================================================

class CryptoError(LedgerGateException):
    """Errore crittografia"""
    pass


class InvalidKeyError(CryptoError):
    """Chiave crittografica invalida"""
    pass


# ============================================================================
# EXPORT ALL
# ============================================================================

__all__ = [
    # Base
    "LedgerGateException",

    # Config
    "ConfigError",

    # Codec
    "CodecError",
    "StringTooLongError",
    "InvalidStringError",
    "InvalidNumberError",
    "TooManyInputsError",
    "TooManyOutputsError",
    "MalformedBinaryDataError",

    # Models
    "MalformedTransactionError",

    # UTXO
    "UTXOError",
    "UTXONotFoundError",

    # Crypto
    "CryptoError",
    "InvalidKeyError",
]
