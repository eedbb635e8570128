"""
LedgerGate - CLI Tests
========================
Tests for the typer command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from ledger_gate.cli.main import app
from ledger_gate.domain.codec import encode_transaction_hex


runner = CliRunner()


@pytest.fixture
def tx_file(tmp_path, signed_tx):
    path = tmp_path / "tx.json"
    path.write_text(signed_tx.to_json(), encoding="utf-8")
    return path


@pytest.fixture
def utxos_file(tmp_path, utxo_pool):
    path = tmp_path / "utxos.json"
    path.write_text(json.dumps(utxo_pool.to_dicts()), encoding="utf-8")
    return path


class TestCLI:
    """Test CLI commands"""

    def test_keygen(self):
        result = runner.invoke(app, ["keygen"])

        assert result.exit_code == 0
        assert "Public key" in result.stdout

    def test_encode(self, tx_file, signed_tx):
        result = runner.invoke(app, ["encode", str(tx_file)])

        assert result.exit_code == 0
        assert result.stdout.strip() == encode_transaction_hex(signed_tx)

    def test_decode(self, signed_tx):
        result = runner.invoke(app, ["decode", encode_transaction_hex(signed_tx)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == signed_tx.to_dict()

    def test_decode_malformed(self, signed_tx):
        result = runner.invoke(app, ["decode", encode_transaction_hex(signed_tx)[:-6]])

        assert result.exit_code == 1

    def test_decode_lenient(self, signed_tx):
        hex_data = encode_transaction_hex(signed_tx) + "00"

        assert runner.invoke(app, ["decode", hex_data]).exit_code == 1
        assert runner.invoke(app, ["decode", "--lenient", hex_data]).exit_code == 0

    def test_validate_valid(self, tx_file, utxos_file):
        result = runner.invoke(app, ["validate", str(tx_file), "--utxos", str(utxos_file), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"valid": True, "errors": []}

    def test_validate_rejected(self, tmp_path, tx_file):
        empty = tmp_path / "empty.json"
        empty.write_text("[]", encoding="utf-8")

        result = runner.invoke(app, ["validate", str(tx_file), "--utxos", str(empty), "--json"])

        assert result.exit_code == 1
        kinds = [e["kind"] for e in json.loads(result.stdout)["errors"]]
        assert kinds == ["UtxoNotFound", "AmountMismatch"]

    def test_validate_bad_file(self, tmp_path, utxos_file):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["validate", str(bad), "--utxos", str(utxos_file)])

        assert result.exit_code == 2

    def test_efficiency(self, tx_file):
        result = runner.invoke(app, ["efficiency", str(tx_file)])

        assert result.exit_code == 0
        assert "Savings" in result.stdout

    def test_validate_utxos_not_a_list(self, tmp_path, tx_file):
        not_a_list = tmp_path / "utxos.json"
        not_a_list.write_text("42", encoding="utf-8")

        result = runner.invoke(app, ["validate", str(tx_file), "--utxos", str(not_a_list)])

        assert result.exit_code == 2
        assert "expected a JSON list" in result.stdout

    def test_validate_utxo_entry_malformed(self, tmp_path, tx_file):
        bad_entry = tmp_path / "utxos.json"
        bad_entry.write_text('[{"amount": 1}]', encoding="utf-8")

        result = runner.invoke(app, ["validate", str(tx_file), "--utxos", str(bad_entry)])

        assert result.exit_code == 2


class TestCLIUnencodableStrings:
    """Test strings with no UTF-8 form coming from JSON escapes"""

    @pytest.fixture
    def surrogate_tx_file(self, tmp_path):
        path = tmp_path / "tx.json"
        # json.dumps escapes the lone surrogate as \ud800
        path.write_text(json.dumps({
            "id": "\ud800",
            "timestamp": 1,
            "inputs": [],
            "outputs": [{"amount": 1, "recipient": "r"}],
        }), encoding="utf-8")
        return path

    def test_efficiency_reports_sentinel(self, surrogate_tx_file):
        result = runner.invoke(app, ["efficiency", str(surrogate_tx_file)])

        assert result.exit_code == 0
        assert "N/A" in result.stdout

    def test_encode_fails_cleanly(self, surrogate_tx_file):
        result = runner.invoke(app, ["encode", str(surrogate_tx_file)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeError)
