"""
LedgerGate - Cryptographic Core Layer
=======================================
Primitive di firma/verifica consumate dal validator.

Security Level: CRITICAL
Version: 1.0.0

Algorithms:
- Signature: ECDSA (secp256k1) + SHA-256

Encoding delle identità (tutte stringhe hex):
- private key: scalare a 32 byte
- public key (identity/owner): punto compresso SEC1 (33 byte)
- signature: DER

Dependencies:
- cryptography (>=41.0.0)
"""

from typing import Tuple, Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.exceptions import InvalidSignature as CryptoInvalidSignature

from ledger_gate.constants import SUPPORTED_CRYPTO_ALGORITHMS
from ledger_gate.errors import CryptoError, InvalidKeyError
from ledger_gate.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("crypto")


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class SignatureVerifier(Protocol):
    """
    Primitiva di verifica consumata dal TransactionValidator.

    Deterministica e senza side effect.
    """

    def verify(self, message: str, signature: str, identity: str) -> bool:
        ...


class CryptoProvider(SignatureVerifier, Protocol):
    """Provider completo: keypair, firma, verifica"""

    def generate_keypair(self) -> Tuple[str, str]:
        ...

    def sign(self, message: str, private_key: str) -> str:
        ...

    def public_key_from_private(self, private_key: str) -> str:
        ...


# ============================================================================
# ECDSA PROVIDER (secp256k1)
# ============================================================================

class ECDSAProvider:
    """
    Provider ECDSA con curva secp256k1.

    Examples:
        >>> provider = ECDSAProvider()
        >>> priv, pub = provider.generate_keypair()
        >>> sig = provider.sign("msg", priv)
        >>> provider.verify("msg", sig, pub)
        True
        >>> provider.verify("other", sig, pub)
        False
    """

    def __init__(self):
        self.curve = ec.SECP256K1()
        self.hash_algo = hashes.SHA256()

    def generate_keypair(self) -> Tuple[str, str]:
        """
        Genera keypair.

        Returns:
            tuple: (private_key_hex, public_key_hex)
        """
        private_key_obj = ec.generate_private_key(self.curve)
        private_hex = private_key_obj.private_numbers().private_value.to_bytes(32, "big").hex()

        logger.debug("ECDSA keypair generated")

        return private_hex, self._public_hex(private_key_obj)

    def public_key_from_private(self, private_key: str) -> str:
        """Deriva l'identità (public key hex) dalla private key"""
        return self._public_hex(self._load_private_key(private_key))

    def sign(self, message: str, private_key: str) -> str:
        """
        Firma messaggio (UTF-8) con ECDSA/SHA-256.

        Raises:
            InvalidKeyError: Private key malformata
        """
        private_key_obj = self._load_private_key(private_key)
        signature = private_key_obj.sign(message.encode("utf-8"), ec.ECDSA(self.hash_algo))

        logger.debug(
            "Message signed with ECDSA",
            extra_data={"message_size": len(message), "signature_size": len(signature)}
        )

        return signature.hex()

    def verify(self, message: str, signature: str, identity: str) -> bool:
        """
        Verifica firma.

        Returns:
            bool: True se valida; False per firma errata o key/firma malformate
        """
        try:
            public_key_obj = ec.EllipticCurvePublicKey.from_encoded_point(
                self.curve,
                bytes.fromhex(identity)
            )
            public_key_obj.verify(
                bytes.fromhex(signature),
                message.encode("utf-8"),
                ec.ECDSA(self.hash_algo)
            )
            return True

        except CryptoInvalidSignature:
            logger.debug("ECDSA signature verification failed: invalid signature")
            return False

        except ValueError as e:
            logger.debug(
                "ECDSA signature verification failed: malformed input",
                extra_data={"error": str(e)}
            )
            return False

    def _load_private_key(self, private_key: str) -> ec.EllipticCurvePrivateKey:
        try:
            value = int(private_key, 16)
            return ec.derive_private_key(value, self.curve)
        except ValueError as e:
            raise InvalidKeyError(f"Invalid private key: {e}", code="INVALID_PRIVATE_KEY")

    @staticmethod
    def _public_hex(private_key_obj: ec.EllipticCurvePrivateKey) -> str:
        return private_key_obj.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint
        ).hex()


# ============================================================================
# PROVIDER FACTORY
# ============================================================================

def get_crypto_provider(algorithm: str = "ecdsa") -> CryptoProvider:
    """
    Factory per ottenere crypto provider.

    Raises:
        CryptoError: Se algorithm non supportato
    """
    algorithm = algorithm.lower()

    if algorithm == "ecdsa":
        return ECDSAProvider()

    raise CryptoError(
        f"Unsupported crypto algorithm: {algorithm}",
        code="UNSUPPORTED_ALGORITHM",
        details={"supported": list(SUPPORTED_CRYPTO_ALGORITHMS)}
    )


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def generate_keypair(algorithm: str = "ecdsa") -> Tuple[str, str]:
    """
    Genera keypair con il provider specificato.

    Returns:
        tuple: (private_key_hex, public_key_hex)
    """
    return get_crypto_provider(algorithm).generate_keypair()


def sign_message(message: str, private_key: str, algorithm: str = "ecdsa") -> str:
    """Firma messaggio con il provider specificato"""
    return get_crypto_provider(algorithm).sign(message, private_key)


def verify_signature(
    message: str,
    signature: str,
    identity: str,
    algorithm: str = "ecdsa"
) -> bool:
    """Verifica firma con il provider specificato"""
    return get_crypto_provider(algorithm).verify(message, signature, identity)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "SignatureVerifier",
    "CryptoProvider",
    "ECDSAProvider",
    "get_crypto_provider",
    "generate_keypair",
    "sign_message",
    "verify_signature",
]
