"""
LedgerGate - Model Tests
==========================
Unit tests for domain models and the signing payload.
"""

import json

import pytest

from ledger_gate.domain.models import (
    UTXO,
    UTXOId,
    Transaction,
    TransactionInput,
    TransactionOutput,
    create_signing_payload,
    get_utxo_key,
)
from ledger_gate.errors import MalformedTransactionError


@pytest.fixture
def tx_dict():
    return {
        "id": "tx2",
        "timestamp": 1700000000,
        "inputs": [
            {"utxoId": {"txId": "tx1", "outputIndex": 0}, "owner": "alice", "signature": "ab"},
        ],
        "outputs": [{"amount": 100, "recipient": "bob"}],
    }


class TestUTXOId:
    """Test UTXO key"""

    def test_key(self):
        assert UTXOId("tx1", 3).key == "tx1:3"
        assert get_utxo_key(UTXOId("tx1", 3)) == "tx1:3"
        assert str(UTXOId("a", 0)) == "a:0"

    def test_hashable_and_ordered(self):
        ids = {UTXOId("b", 0), UTXOId("a", 1), UTXOId("a", 1)}
        assert sorted(ids) == [UTXOId("a", 1), UTXOId("b", 0)]


class TestTransactionDict:
    """Test camelCase JSON form"""

    def test_from_dict(self, tx_dict):
        tx = Transaction.from_dict(tx_dict)

        assert tx.inputs[0].utxo_id == UTXOId("tx1", 0)
        assert tx.outputs[0] == TransactionOutput(100, "bob")
        assert tx.total_output_amount() == 100

    def test_round_trip(self, tx_dict):
        assert Transaction.from_dict(tx_dict).to_dict() == tx_dict

    def test_to_json_compact(self, tx_dict):
        text = Transaction.from_dict(tx_dict).to_json()

        assert " " not in text
        assert json.loads(text) == tx_dict

    def test_missing_field(self, tx_dict):
        del tx_dict["outputs"]
        with pytest.raises(MalformedTransactionError) as exc_info:
            Transaction.from_dict(tx_dict)
        assert exc_info.value.code == "MISSING_FIELD"

    def test_wrong_type(self, tx_dict):
        tx_dict["outputs"][0]["amount"] = "100"
        with pytest.raises(MalformedTransactionError) as exc_info:
            Transaction.from_dict(tx_dict)
        assert exc_info.value.code == "INVALID_FIELD_TYPE"

    def test_bool_is_not_a_number(self, tx_dict):
        tx_dict["timestamp"] = True
        with pytest.raises(MalformedTransactionError):
            Transaction.from_dict(tx_dict)

    def test_not_an_object(self):
        with pytest.raises(MalformedTransactionError) as exc_info:
            Transaction.from_dict([1, 2])
        assert exc_info.value.code == "INVALID_JSON_SHAPE"

    def test_utxo_from_dict(self):
        utxo = UTXO.from_dict({"utxoId": {"txId": "a", "outputIndex": 2}, "amount": 7, "recipient": "r"})
        assert utxo == UTXO(UTXOId("a", 2), 7, "r")


class TestSigningPayload:
    """Test signing payload"""

    def test_excludes_signatures(self, tx_dict):
        payload = create_signing_payload(Transaction.from_dict(tx_dict))

        assert "signature" not in payload
        assert payload == (
            '{"id":"tx2",'
            '"inputs":[{"utxoId":{"txId":"tx1","outputIndex":0},"owner":"alice"}],'
            '"outputs":[{"amount":100,"recipient":"bob"}],'
            '"timestamp":1700000000}'
        )

    def test_independent_of_signature_value(self):
        def make(signature):
            return Transaction("t", 1, [TransactionInput(UTXOId("p", 0), "o", signature)], [])

        assert create_signing_payload(make("aa")) == create_signing_payload(make("bb"))

    def test_unicode_not_escaped(self):
        tx = Transaction("t", 1, [], [TransactionOutput(1, "José")])
        assert "José" in create_signing_payload(tx)
