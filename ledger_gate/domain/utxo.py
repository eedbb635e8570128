"""
LedgerGate - UTXO Store
=========================
Interfaccia dello store UTXO consumata dal validator e implementazione
in-memory di riferimento.

Security Level: CRITICAL
Version: 1.0.0

UTXOPool:
- Lookup O(1) per (tx_id, output_index)
- Index per owner
- Thread-safe (RLock)
- Snapshot per rollback
- Commit atomico di transazioni validate
"""

from __future__ import annotations
from typing import Dict, List, Set, Optional, Any, Iterable, Protocol, runtime_checkable
from collections import defaultdict
from dataclasses import dataclass
import threading

from ledger_gate.domain.models import (
    UTXO,
    UTXOId,
    Transaction,
)
from ledger_gate.errors import (
    UTXOError,
    UTXONotFoundError,
)
from ledger_gate.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("utxo")


# ============================================================================
# STORE PROTOCOL
# ============================================================================

@runtime_checkable
class UTXOStore(Protocol):
    """
    Vista read-only dello store consumata dal TransactionValidator.

    Lo store deve fornire uno snapshot di lettura consistente per chiamata.
    """

    def get_utxo(self, tx_id: str, output_index: int) -> Optional[UTXO]:
        ...


# ============================================================================
# UTXO POOL
# ============================================================================

class UTXOPool:
    """
    Pool in-memory di UTXO.

    Mantiene:
    - Mapping chiave "tx_id:index" → UTXO
    - Index owner → set di chiavi

    Examples:
        >>> pool = UTXOPool()
        >>> pool.add_utxo(UTXO(UTXOId("tx1", 0), 100, "alice"))
        >>> pool.get_utxo("tx1", 0).amount
        100
    """

    def __init__(self, utxos: Optional[Iterable[UTXO]] = None):
        self._utxos: Dict[str, UTXO] = {}
        self._owner_index: Dict[str, Set[str]] = defaultdict(set)
        self._lock = threading.RLock()

        for utxo in utxos or ():
            self.add_utxo(utxo)

        logger.debug("UTXOPool initialized", extra_data={"total_utxos": len(self._utxos)})

    def add_utxo(self, utxo: UTXO) -> None:
        """
        Aggiungi UTXO al pool.

        Raises:
            UTXOError: Se UTXO già presente
        """
        key = utxo.utxo_id.key
        with self._lock:
            if key in self._utxos:
                raise UTXOError(
                    f"UTXO {key} already exists in pool",
                    code="UTXO_DUPLICATE",
                    details={"utxo_key": key}
                )

            self._utxos[key] = utxo
            self._owner_index[utxo.recipient].add(key)

            logger.debug(
                "UTXO added",
                extra_data={"utxo_key": key, "amount": utxo.amount}
            )

    def remove_utxo(self, tx_id: str, output_index: int) -> UTXO:
        """
        Rimuovi UTXO dal pool (quando speso).

        Raises:
            UTXONotFoundError: Se UTXO non trovato
        """
        key = UTXOId(tx_id, output_index).key
        with self._lock:
            if key not in self._utxos:
                raise UTXONotFoundError(
                    f"UTXO {key} not found in pool",
                    code="UTXO_NOT_FOUND",
                    details={"utxo_key": key}
                )

            utxo = self._utxos.pop(key)

            owner_keys = self._owner_index[utxo.recipient]
            owner_keys.discard(key)
            if not owner_keys:
                del self._owner_index[utxo.recipient]

            logger.debug("UTXO removed", extra_data={"utxo_key": key, "amount": utxo.amount})

            return utxo

    def get_utxo(self, tx_id: str, output_index: int) -> Optional[UTXO]:
        """UTXO per (tx_id, output_index), None se assente"""
        with self._lock:
            return self._utxos.get(UTXOId(tx_id, output_index).key)

    def contains(self, tx_id: str, output_index: int) -> bool:
        with self._lock:
            return UTXOId(tx_id, output_index).key in self._utxos

    def get_utxos_for_owner(self, owner: str) -> List[UTXO]:
        """Tutti gli UTXO di un owner, ordinati per chiave"""
        with self._lock:
            keys = sorted(self._owner_index.get(owner, ()))
            return [self._utxos[key] for key in keys]

    def get_balance(self, owner: str) -> int:
        """
        Balance totale di un owner.

        Examples:
            >>> pool = UTXOPool([UTXO(UTXOId("tx1", 0), 100, "a"), UTXO(UTXOId("tx2", 0), 50, "a")])
            >>> pool.get_balance("a")
            150
        """
        return sum(utxo.amount for utxo in self.get_utxos_for_owner(owner))

    def total_supply(self) -> int:
        with self._lock:
            return sum(utxo.amount for utxo in self._utxos.values())

    def utxo_count(self) -> int:
        with self._lock:
            return len(self._utxos)

    def owner_count(self) -> int:
        with self._lock:
            return len(self._owner_index)

    def apply_transaction(self, tx: Transaction) -> None:
        """
        Commit di una transazione validata.

        Operations:
        1. Rimuovi gli UTXO spesi dagli input
        2. Aggiungi ogni output come UTXO (tx.id, index)

        Atomica: se un input manca o un output esiste già, il pool resta invariato.

        Raises:
            UTXONotFoundError: Input non presente
            UTXOError: Output già presente
        """
        with self._lock:
            snapshot = self.get_snapshot()
            try:
                for inp in tx.inputs:
                    self.remove_utxo(inp.utxo_id.tx_id, inp.utxo_id.output_index)

                for idx, output in enumerate(tx.outputs):
                    self.add_utxo(UTXO(UTXOId(tx.id, idx), output.amount, output.recipient))
            except UTXOError:
                self.restore_snapshot(snapshot)
                raise

            logger.info(
                "Transaction applied to UTXO pool",
                extra_data={
                    "tx_id": tx.id[:16],
                    "inputs_removed": len(tx.inputs),
                    "outputs_added": len(tx.outputs),
                    "total_utxos": len(self._utxos),
                }
            )

    def get_snapshot(self) -> UTXOPoolSnapshot:
        """Snapshot immutabile dello stato corrente"""
        with self._lock:
            return UTXOPoolSnapshot(utxos=dict(self._utxos))

    def restore_snapshot(self, snapshot: UTXOPoolSnapshot) -> None:
        """
        Ripristina il pool da snapshot.

        Warning:
            Operazione distruttiva - sovrascrive stato corrente
        """
        with self._lock:
            self._utxos = dict(snapshot.utxos)
            self._owner_index = defaultdict(set)
            for key, utxo in self._utxos.items():
                self._owner_index[utxo.recipient].add(key)

            logger.debug("UTXO pool restored from snapshot", extra_data={"utxo_count": len(self._utxos)})

    def clear(self) -> None:
        with self._lock:
            self._utxos.clear()
            self._owner_index.clear()

            logger.warning("UTXO pool cleared")

    def get_statistics(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "total_utxos": self.utxo_count(),
                "total_owners": self.owner_count(),
                "total_supply": self.total_supply(),
            }

    # ========================================================================
    # PERSISTENCE HELPERS
    # ========================================================================

    def to_dicts(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [self._utxos[key].to_dict() for key in sorted(self._utxos)]

    @classmethod
    def from_dicts(cls, data: Iterable[Dict[str, Any]]) -> UTXOPool:
        return cls(UTXO.from_dict(item) for item in data)

    def __len__(self) -> int:
        return self.utxo_count()

    def __repr__(self) -> str:
        return f"UTXOPool(utxos={self.utxo_count()}, supply={self.total_supply()})"


# ============================================================================
# UTXO POOL SNAPSHOT
# ============================================================================

@dataclass(frozen=True)
class UTXOPoolSnapshot:
    """Snapshot immutabile di UTXOPool"""

    utxos: Dict[str, UTXO]

    @property
    def utxo_count(self) -> int:
        return len(self.utxos)

    @property
    def total_supply(self) -> int:
        return sum(utxo.amount for utxo in self.utxos.values())


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "UTXOStore",
    "UTXOPool",
    "UTXOPoolSnapshot",
]
