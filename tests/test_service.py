"""
LedgerGate - Service Tests
============================
Unit tests for TransactionBuilder and TransactionService.
"""

import pytest

from ledger_gate.domain.models import UTXOId
from ledger_gate.domain.codec import encode_transaction
from ledger_gate.domain.validation import ValidationErrorKind
from ledger_gate.errors import MalformedBinaryDataError
from ledger_gate.services.transaction_service import TransactionBuilder, TransactionService


@pytest.fixture
def service(utxo_pool, provider, test_config):
    return TransactionService(utxo_pool, provider, test_config)


class TestTransactionBuilder:
    """Test building and signing"""

    def test_owner_derived_from_key(self, signed_tx, alice, provider):
        assert signed_tx.inputs[0].owner == alice[1]
        assert provider.verify(
            signed_tx.unsigned().signing_payload(),
            signed_tx.inputs[0].signature,
            alice[1],
        )

    def test_default_id_and_timestamp(self, provider, alice):
        tx = (
            TransactionBuilder(provider)
            .add_input(UTXOId("tx1", 0), alice[0])
            .add_output(100, "bob")
            .build()
        )

        assert tx.timestamp > 0
        assert tx.id == f"tx-{tx.timestamp}-1-1"

    def test_fluent_setters(self, provider):
        tx = TransactionBuilder(provider).with_id("x").with_timestamp(5).add_output(1, "r").build()

        assert (tx.id, tx.timestamp, tx.inputs) == ("x", 5, [])


class TestTransactionService:
    """Test validate, submit and ingest"""

    def test_submit_valid_commits(self, service, utxo_pool, signed_tx, bob):
        result = service.submit(signed_tx)

        assert result.valid
        assert not utxo_pool.contains("tx1", 0)
        assert utxo_pool.get_balance(bob[1]) == 100

    def test_submit_invalid_leaves_store(self, service, utxo_pool, builder, alice, bob):
        tx = builder().add_input(UTXOId("tx1", 0), alice[0]).add_output(90, bob[1]).build()
        before = utxo_pool.to_dicts()

        result = service.submit(tx)

        assert result.kinds() == [ValidationErrorKind.AMOUNT_MISMATCH]
        assert utxo_pool.to_dicts() == before

    def test_second_spend_rejected(self, service, builder, alice, bob):
        first = builder("tx2").add_input(UTXOId("tx1", 0), alice[0]).add_output(100, bob[1]).build()
        second = builder("tx3").add_input(UTXOId("tx1", 0), alice[0]).add_output(100, alice[1]).build()

        assert service.submit(first).valid
        assert service.submit(second).kinds() == [
            ValidationErrorKind.UTXO_NOT_FOUND,
            ValidationErrorKind.AMOUNT_MISMATCH,
        ]

    def test_validate_does_not_commit(self, service, utxo_pool, signed_tx):
        assert service.validate(signed_tx).valid
        assert utxo_pool.contains("tx1", 0)

    def test_ingest(self, service, signed_tx):
        tx, result = service.ingest(service.encode(signed_tx))

        assert tx == signed_tx
        assert result.valid

    def test_ingest_malformed(self, service, signed_tx):
        with pytest.raises(MalformedBinaryDataError):
            service.ingest(encode_transaction(signed_tx)[:-3])

    def test_submit_requires_mutable_store(self, provider, test_config, signed_tx):
        class ReadOnlyStore:
            def get_utxo(self, tx_id, output_index):
                return None

        with pytest.raises(TypeError):
            TransactionService(ReadOnlyStore(), provider, test_config).submit(signed_tx)
