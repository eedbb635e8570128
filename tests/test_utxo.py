"""
LedgerGate - UTXO Pool Tests
==============================
Unit tests for the in-memory UTXO store.
"""

import pytest

from ledger_gate.domain.models import (
    UTXO,
    UTXOId,
    Transaction,
    TransactionInput,
    TransactionOutput,
)
from ledger_gate.domain.utxo import UTXOPool, UTXOStore
from ledger_gate.errors import UTXOError, UTXONotFoundError


def _spend(tx_id: str, inputs, outputs) -> Transaction:
    return Transaction(
        id=tx_id,
        timestamp=1,
        inputs=[TransactionInput(UTXOId(t, i), "o", "s") for t, i in inputs],
        outputs=[TransactionOutput(amount, recipient) for amount, recipient in outputs],
    )


class TestUTXOPool:
    """Test lookup and mutation"""

    def test_satisfies_store_protocol(self):
        assert isinstance(UTXOPool(), UTXOStore)

    def test_lookup(self, utxo_pool, alice):
        utxo = utxo_pool.get_utxo("tx1", 0)

        assert utxo.amount == 100
        assert utxo.owner == alice[1]
        assert utxo_pool.get_utxo("tx1", 9) is None

    def test_duplicate_rejected(self, utxo_pool):
        with pytest.raises(UTXOError) as exc_info:
            utxo_pool.add_utxo(UTXO(UTXOId("tx1", 0), 1, "x"))
        assert exc_info.value.code == "UTXO_DUPLICATE"

    def test_remove(self, utxo_pool):
        removed = utxo_pool.remove_utxo("tx1", 0)

        assert removed.amount == 100
        assert not utxo_pool.contains("tx1", 0)

    def test_remove_missing(self, utxo_pool):
        with pytest.raises(UTXONotFoundError):
            utxo_pool.remove_utxo("tx9", 0)

    def test_balance_and_supply(self, utxo_pool, alice):
        assert utxo_pool.get_balance(alice[1]) == 150
        assert utxo_pool.get_balance("nobody") == 0
        assert utxo_pool.total_supply() == 150
        assert len(utxo_pool) == 2

    def test_owner_utxos_sorted(self, utxo_pool, alice):
        keys = [u.utxo_id.key for u in utxo_pool.get_utxos_for_owner(alice[1])]
        assert keys == ["tx1:0", "tx1:1"]

    def test_statistics(self, utxo_pool):
        assert utxo_pool.get_statistics() == {
            "total_utxos": 2,
            "total_owners": 1,
            "total_supply": 150,
        }


class TestApplyTransaction:
    """Test transaction commit"""

    def test_apply_moves_value(self, utxo_pool, alice):
        utxo_pool.apply_transaction(_spend("tx2", [("tx1", 0)], [(60, "bob"), (40, "carol")]))

        assert not utxo_pool.contains("tx1", 0)
        assert utxo_pool.get_utxo("tx2", 0).amount == 60
        assert utxo_pool.get_utxo("tx2", 1).recipient == "carol"
        assert utxo_pool.get_balance(alice[1]) == 50
        assert utxo_pool.total_supply() == 150

    def test_apply_is_atomic(self, utxo_pool):
        before = utxo_pool.to_dicts()

        with pytest.raises(UTXONotFoundError):
            utxo_pool.apply_transaction(_spend("tx2", [("tx1", 0), ("missing", 0)], [(100, "bob")]))

        assert utxo_pool.to_dicts() == before

    def test_snapshot_restore(self, utxo_pool):
        snapshot = utxo_pool.get_snapshot()
        utxo_pool.clear()

        assert len(utxo_pool) == 0

        utxo_pool.restore_snapshot(snapshot)

        assert snapshot.utxo_count == 2
        assert snapshot.total_supply == 150
        assert utxo_pool.total_supply() == 150
        assert utxo_pool.owner_count() == 1


class TestPersistence:
    """Test dict round trip"""

    def test_dicts_round_trip(self, utxo_pool):
        restored = UTXOPool.from_dicts(utxo_pool.to_dicts())

        assert restored.to_dicts() == utxo_pool.to_dicts()

    def test_dict_shape(self):
        pool = UTXOPool([UTXO(UTXOId("a", 1), 5, "r")])
        assert pool.to_dicts() == [
            {"utxoId": {"txId": "a", "outputIndex": 1}, "amount": 5, "recipient": "r"}
        ]
