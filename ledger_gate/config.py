"""
LedgerGate - Configuration Management
=======================================
Configurazione centralizzata con Pydantic Settings.
Supporta environment variables, file .env, override runtime.

Security Level: HIGH
Version: 1.0.0

Features:
- Validazione automatica tipi
- Environment variables con prefisso LEDGERGATE_
- File .env support
- Profile dev/prod
"""

import os
from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledger_gate.constants import SUPPORTED_CRYPTO_ALGORITHMS


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

class LedgerSettings(BaseSettings):
    """
    Configurazione principale LedgerGate.

    Example:
        # Da environment
        export LEDGERGATE_LOG_LEVEL=DEBUG
        export LEDGERGATE_STRICT_DECODING=false

        # Da codice
        config = LedgerSettings(log_to_file=False)
    """

    model_config = SettingsConfigDict(
        env_prefix='LEDGERGATE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # ========================================================================
    # CRYPTO
    # ========================================================================

    crypto_algorithm: str = Field(
        default="ecdsa",
        description="Algoritmo firma: ecdsa (secp256k1)"
    )

    # ========================================================================
    # CODEC
    # ========================================================================

    strict_decoding: bool = Field(
        default=True,
        description="Rifiuta byte in eccesso dopo l'ultimo campo decodificato"
    )

    # ========================================================================
    # VALIDATION
    # ========================================================================

    validation_slow_threshold_ms: Optional[float] = Field(
        default=250.0,
        gt=0,
        description="Soglia (ms) oltre la quale una validazione viene loggata come lenta"
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_to_file: bool = Field(
        default=True,
        description="Salva log su file"
    )

    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory log files"
    )

    log_format: str = Field(
        default="json",
        description="Formato log: json, text"
    )

    log_rotation_mb: int = Field(
        default=100,
        ge=1,
        description="Dimensione max file log prima rotation (MB)"
    )

    log_retention_days: int = Field(
        default=30,
        ge=1,
        description="Numero file log conservati"
    )

    # ========================================================================
    # DEVELOPMENT
    # ========================================================================

    dev_mode: bool = Field(
        default=False,
        description="Modalità sviluppo (log DEBUG su console)"
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Valida formato log"""
        v_lower = v.lower()
        if v_lower not in ('json', 'text'):
            raise ValueError(f"Invalid log_format: {v}. Must be 'json' or 'text'")
        return v_lower

    @field_validator('crypto_algorithm')
    @classmethod
    def validate_crypto_algorithm(cls, v: str) -> str:
        """Valida algoritmo crypto"""
        v_lower = v.lower()
        if v_lower not in SUPPORTED_CRYPTO_ALGORITHMS:
            raise ValueError(
                f"Invalid crypto_algorithm: {v}. Must be one of {list(SUPPORTED_CRYPTO_ALGORITHMS)}"
            )
        return v_lower

    # ========================================================================
    # POST-INIT PROCESSING
    # ========================================================================

    def model_post_init(self, __context) -> None:
        """Dev mode forza log DEBUG"""
        if self.dev_mode:
            self.log_level = "DEBUG"

    # ========================================================================
    # HELPER METHODS
    # ========================================================================

    def to_dict(self) -> dict:
        """Serializza config"""
        return self.model_dump()

    def to_json(self) -> str:
        """Serializza config in JSON"""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "LedgerSettings":
        """Carica config da JSON"""
        return cls.model_validate_json(json_str)

    @classmethod
    def from_file(cls, path: Path) -> "LedgerSettings":
        """Carica config da file JSON"""
        return cls.model_validate_json(Path(path).read_text())

    def save_to_file(self, path: Path) -> None:
        """Salva config su file"""
        Path(path).write_text(self.to_json())

    def __repr__(self) -> str:
        return (
            f"LedgerSettings("
            f"crypto_algorithm={self.crypto_algorithm}, "
            f"strict_decoding={self.strict_decoding}, "
            f"log_level={self.log_level})"
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

@lru_cache(maxsize=1)
def get_settings() -> LedgerSettings:
    """
    Ottieni singleton instance di LedgerSettings.

    Returns:
        LedgerSettings: Instance configurazione (cached)
    """
    return LedgerSettings()


def reload_settings() -> LedgerSettings:
    """
    Ricarica settings (invalida cache).

    Usare quando si cambiano environment variables a runtime.
    """
    get_settings.cache_clear()
    return get_settings()


def override_settings(**kwargs) -> LedgerSettings:
    """
    Override settings con valori custom (utile per testing).

    Example:
        >>> test_config = override_settings(log_to_file=False, dev_mode=True)
    """
    return LedgerSettings(**kwargs)


# ============================================================================
# PROFILE PRESETS
# ============================================================================

def get_development_config() -> LedgerSettings:
    """
    Config preset per development.

    - Dev mode (log DEBUG)
    - Niente log su file
    - Log testuale
    """
    return LedgerSettings(
        dev_mode=True,
        log_to_file=False,
        log_format="text",
    )


# ============================================================================
# CONFIGURATION VALIDATION
# ============================================================================

def validate_config(config: LedgerSettings) -> tuple[bool, list[str]]:
    """
    Valida configurazione completa.

    Returns:
        tuple: (is_valid, errors_list)

    Example:
        >>> is_valid, errors = validate_config(get_settings())
    """
    errors = []

    if config.log_to_file:
        log_dir = Path(config.log_dir)
        if log_dir.exists() and not log_dir.is_dir():
            errors.append(f"Log path is not a directory: {log_dir}")

        # La directory viene creata da setup_logging: controlla il primo parent esistente
        candidate = log_dir
        while not candidate.exists() and candidate != candidate.parent:
            candidate = candidate.parent
        if not os.access(candidate, os.W_OK):
            errors.append(f"Directory not writable: {log_dir}")

    return (len(errors) == 0, errors)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "LedgerSettings",
    "get_settings",
    "reload_settings",
    "override_settings",
    "get_development_config",
    "validate_config",
]
