"""
LedgerGate - Pytest Configuration
===================================
Fixtures and configuration for testing.

Version: 1.0.0
"""

import pytest

# Internal imports
from ledger_gate.config import LedgerSettings, get_settings
from ledger_gate.domain.models import UTXO, UTXOId
from ledger_gate.domain.utxo import UTXOPool
from ledger_gate.domain.crypto_core import ECDSAProvider
from ledger_gate.domain.validation import TransactionValidator
from ledger_gate.services.transaction_service import TransactionBuilder


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def test_config():
    """Test configuration (no file logging)"""
    return LedgerSettings(log_to_file=False)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Settings singleton isolated from the process environment"""
    monkeypatch.setenv("LEDGERGATE_LOG_TO_FILE", "false")
    monkeypatch.setenv("LEDGERGATE_LOG_DIR", str(tmp_path / "logs"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# CRYPTO FIXTURES
# ============================================================================

@pytest.fixture
def provider():
    """ECDSA provider"""
    return ECDSAProvider()


@pytest.fixture
def alice(provider):
    """Keypair (private_hex, public_hex)"""
    return provider.generate_keypair()


@pytest.fixture
def bob(provider):
    """Keypair (private_hex, public_hex)"""
    return provider.generate_keypair()


# ============================================================================
# UTXO FIXTURES
# ============================================================================

@pytest.fixture
def utxo_pool(alice):
    """Pool with two UTXOs owned by alice: tx1:0 = 100, tx1:1 = 50"""
    _, alice_pub = alice
    return UTXOPool([
        UTXO(UTXOId("tx1", 0), 100, alice_pub),
        UTXO(UTXOId("tx1", 1), 50, alice_pub),
    ])


@pytest.fixture
def validator(utxo_pool, provider):
    """Validator over the test pool"""
    return TransactionValidator(utxo_pool, provider)


# ============================================================================
# HELPER FIXTURES
# ============================================================================

@pytest.fixture
def builder(provider):
    """TransactionBuilder factory with fixed id/timestamp"""
    def _make(tx_id: str = "tx2", timestamp: int = 1700000000) -> TransactionBuilder:
        return TransactionBuilder(provider, tx_id=tx_id, timestamp=timestamp)
    return _make


@pytest.fixture
def signed_tx(builder, alice, bob):
    """Valid transaction: spends tx1:0 (100) to bob"""
    alice_priv, _ = alice
    _, bob_pub = bob
    return (
        builder()
        .add_input(UTXOId("tx1", 0), alice_priv)
        .add_output(100, bob_pub)
        .build()
    )
