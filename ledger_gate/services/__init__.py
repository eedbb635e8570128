"""
LedgerGate - Services Package
===============================
High-level service layer.
"""

from ledger_gate.services.transaction_service import TransactionBuilder, TransactionService

__all__ = [
    "TransactionBuilder",
    "TransactionService",
]
