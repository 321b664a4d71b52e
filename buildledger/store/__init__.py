"""In-memory snapshot store for ledger entities."""

from buildledger.store.ledger import LedgerStore

__all__ = ["LedgerStore"]
