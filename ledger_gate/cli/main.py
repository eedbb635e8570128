"""
LedgerGate - Command Line Interface
=====================================
CLI per codec e validazione transazioni.

Security Level: MEDIUM
Version: 1.0.0

Commands:
- keygen: Genera keypair
- encode: JSON → hex wire format
- decode: hex wire format → JSON
- validate: Valida transazione contro un file di UTXO
- efficiency: Confronto dimensioni JSON vs binario
"""

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from ledger_gate.domain.models import Transaction
from ledger_gate.domain.codec import (
    encode_transaction_hex,
    decode_transaction_hex,
    get_encoding_efficiency,
)
from ledger_gate.domain.crypto_core import get_crypto_provider
from ledger_gate.domain.utxo import UTXOPool
from ledger_gate.domain.validation import TransactionValidator
from ledger_gate.config import get_settings
from ledger_gate.errors import LedgerGateException
from ledger_gate.logging_setup import setup_logging
from ledger_gate.utils.serialization import serialize_to_json


# ============================================================================
# CLI APP
# ============================================================================

app = typer.Typer(
    name="ledgergate",
    help="LedgerGate - UTXO transaction validator and binary codec",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log DEBUG su console")
):
    """Setup logging da configurazione"""
    config = get_settings()
    setup_logging(
        log_level="DEBUG" if verbose else config.log_level,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
        log_format=config.log_format,
        log_rotation_mb=config.log_rotation_mb,
        log_retention_days=config.log_retention_days,
        enable_console=verbose or config.dev_mode,
    )


# ============================================================================
# HELPERS
# ============================================================================

def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(2)


def _load_transaction(path: Path) -> Transaction:
    data = _load_json(path)
    try:
        return Transaction.from_dict(data)
    except LedgerGateException as e:
        console.print(f"[red]Invalid transaction: {e}[/red]")
        raise typer.Exit(2)


def _load_utxo_pool(path: Path) -> UTXOPool:
    data = _load_json(path)
    if not isinstance(data, list):
        console.print(f"[red]Invalid UTXO file: expected a JSON list, got {type(data).__name__}[/red]")
        raise typer.Exit(2)
    try:
        return UTXOPool.from_dicts(data)
    except LedgerGateException as e:
        console.print(f"[red]Invalid UTXO file: {e}[/red]")
        raise typer.Exit(2)


# ============================================================================
# COMMANDS
# ============================================================================

@app.command("keygen")
def keygen():
    """Genera una nuova keypair"""
    provider = get_crypto_provider(get_settings().crypto_algorithm)
    private_key, public_key = provider.generate_keypair()

    console.print(Panel.fit(
        f"Public key (identity): [cyan]{public_key}[/cyan]\n"
        f"Private key: [yellow]{private_key}[/yellow]",
        title="New keypair",
        border_style="green"
    ))


@app.command("encode")
def encode(
    tx_file: Path = typer.Argument(..., help="Transazione in JSON")
):
    """Stampa il wire format hex di una transazione"""
    tx = _load_transaction(tx_file)
    try:
        typer.echo(encode_transaction_hex(tx))
    except LedgerGateException as e:
        console.print(f"[red]Encoding failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("decode")
def decode(
    hex_data: str = typer.Argument(..., help="Wire format hex"),
    lenient: bool = typer.Option(False, "--lenient", help="Ignora byte in eccesso"),
):
    """Decodifica il wire format hex in JSON"""
    strict = get_settings().strict_decoding and not lenient
    try:
        tx = decode_transaction_hex(hex_data, strict=strict)
    except LedgerGateException as e:
        console.print(f"[red]Decoding failed: {e}[/red]")
        raise typer.Exit(1)

    typer.echo(serialize_to_json(tx.to_dict(), indent=2))


@app.command("validate")
def validate(
    tx_file: Path = typer.Argument(..., help="Transazione in JSON"),
    utxos_file: Path = typer.Option(..., "--utxos", "-u", help="Lista UTXO in JSON"),
    output_json: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Valida una transazione contro un set di UTXO"""
    tx = _load_transaction(tx_file)
    pool = _load_utxo_pool(utxos_file)

    config = get_settings()
    validator = TransactionValidator(
        pool,
        get_crypto_provider(config.crypto_algorithm),
        slow_threshold_ms=config.validation_slow_threshold_ms,
    )
    result = validator.validate_transaction(tx)

    if output_json:
        typer.echo(serialize_to_json(result.to_dict(), indent=2))
    elif result.valid:
        console.print(f"[green]✅ Transaction {tx.id} is valid[/green]")
    else:
        table = Table(title=f"Transaction {tx.id} rejected")
        table.add_column("#", justify="right")
        table.add_column("Kind", style="red")
        table.add_column("Message")
        for idx, error in enumerate(result.errors):
            table.add_row(str(idx), error.kind.value, error.message)
        console.print(table)

    if not result.valid:
        raise typer.Exit(1)


@app.command("efficiency")
def efficiency(
    tx_file: Path = typer.Argument(..., help="Transazione in JSON")
):
    """Confronta dimensione JSON e binaria"""
    tx = _load_transaction(tx_file)
    eff = get_encoding_efficiency(tx)

    table = Table(title="Encoding efficiency")
    table.add_column("Format")
    table.add_column("Bytes", justify="right")
    table.add_row("JSON", str(eff.json_size))
    table.add_row("Binary", str(eff.binary_size))
    table.add_row("Savings", eff.savings)
    console.print(table)


if __name__ == "__main__":
    app()
