"""Lifecycle actions persisted through the backend.

Every action is two-phase: the lifecycle service computes the new
transaction, then the backend write decides whether it sticks. The
``ConsistencyMode`` fixes when the local snapshot sees the change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import httpx

from buildledger.client.rest import BackendClient
from buildledger.engine.lifecycle import TransactionLifecycle
from buildledger.exceptions import BackendError, BuildLedgerError
from buildledger.models.finance import Actor, Transaction
from buildledger.store import LedgerStore

logger = logging.getLogger(__name__)


class ConsistencyMode(str, Enum):
    """When the local snapshot is updated relative to the backend write."""

    APPLY_THEN_CONFIRM = "APPLY_THEN_CONFIRM"  # update locally, roll back on failure
    CONFIRM_THEN_APPLY = "CONFIRM_THEN_APPLY"  # update locally only after success


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of one workflow action."""

    ok: bool
    value: Transaction | None = None
    error: BuildLedgerError | None = None

    @property
    def message(self) -> str:
        return str(self.error) if self.error else ""


class TransactionWorkflow:
    """Run lifecycle actions against a store snapshot and the backend.

    Parameters
    ----------
    client : BackendClient
        Backend used to persist the new transaction value.
    store : LedgerStore | None
        Local snapshot; ``refresh`` builds one when omitted.
    lifecycle : TransactionLifecycle | None
        Rules engine, possibly carrying an audit trail.
    mode : ConsistencyMode
        Consistency window for local updates.
    """

    def __init__(
        self,
        client: BackendClient,
        store: LedgerStore | None = None,
        lifecycle: TransactionLifecycle | None = None,
        mode: ConsistencyMode = ConsistencyMode.APPLY_THEN_CONFIRM,
    ) -> None:
        self.client = client
        self.store = store if store is not None else LedgerStore(strict=False)
        self.lifecycle = lifecycle or TransactionLifecycle()
        self.mode = mode

    def submit(self, transaction_id: str, actor: Actor) -> WorkflowResult:
        return self._run(transaction_id, lambda t: self.lifecycle.submit(t, actor))

    def approve(self, transaction_id: str, actor: Actor) -> WorkflowResult:
        return self._run(transaction_id, lambda t: self.lifecycle.approve(t, actor))

    def reject(self, transaction_id: str, reason: str, actor: Actor) -> WorkflowResult:
        return self._run(transaction_id, lambda t: self.lifecycle.reject(t, reason, actor))

    def pay(self, transaction_id: str, account_id: str, actor: Actor) -> WorkflowResult:
        return self._run(transaction_id, lambda t: self.lifecycle.pay(t, account_id, actor))

    def confirm_income(self, transaction_id: str, account_id: str, actor: Actor) -> WorkflowResult:
        return self._run(transaction_id, lambda t: self.lifecycle.confirm_income(t, account_id, actor))

    def refresh(self) -> LedgerStore:
        """Reload the authoritative snapshot from the backend."""
        store = LedgerStore(strict=False)
        for project in self.client.list_projects():
            store.add_project(project)
        for partner in self.client.list_partners():
            store.add_partner(partner)
        for account in self.client.list_accounts():
            store.add_account(account)
        for contract in self.client.list_contracts():
            store.add_contract(contract)
        for transaction in self.client.list_transactions():
            store.add_transaction(transaction)

        self.store = store
        logger.info("Snapshot refreshed: %s", store.summary())
        return store

    def _run(
        self,
        transaction_id: str,
        transition: Callable[[Transaction], Transaction],
    ) -> WorkflowResult:
        try:
            current = self.store.get_transaction(transaction_id)
            updated = transition(current)
        except BuildLedgerError as exc:
            return WorkflowResult(ok=False, error=exc)

        if self.mode == ConsistencyMode.APPLY_THEN_CONFIRM:
            try:
                previous = self.store.update_transaction(updated)
            except BuildLedgerError as exc:
                return WorkflowResult(ok=False, error=exc)
            try:
                self.client.update_transaction(updated)
            except (BackendError, httpx.HTTPError) as exc:
                self.store.restore_transaction(previous)
                logger.error("Write of %s failed, local change rolled back: %s", transaction_id, exc)
                return WorkflowResult(ok=False, error=_as_backend_error(exc))
            return WorkflowResult(ok=True, value=updated)

        try:
            self.store.check_update(updated)
        except BuildLedgerError as exc:
            return WorkflowResult(ok=False, error=exc)
        try:
            self.client.update_transaction(updated)
        except (BackendError, httpx.HTTPError) as exc:
            logger.error("Write of %s failed, snapshot unchanged: %s", transaction_id, exc)
            return WorkflowResult(ok=False, error=_as_backend_error(exc))
        try:
            self.store.update_transaction(updated)
        except BuildLedgerError as exc:
            # Backend already holds the new value; refresh() reconciles
            logger.error("Saved %s but snapshot refused it: %s", transaction_id, exc)
            return WorkflowResult(ok=False, value=updated, error=exc)
        return WorkflowResult(ok=True, value=updated)


def _as_backend_error(exc: Exception) -> BackendError:
    if isinstance(exc, BackendError):
        return exc
    return BackendError(f"Backend unreachable: {exc}")
