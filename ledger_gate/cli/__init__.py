"""LedgerGate - CLI Package"""
