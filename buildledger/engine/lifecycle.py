"""Transaction approval workflow.

State graph::

    DRAFT ----submit----> SUBMITTED
    SUBMITTED --approve--> APPROVED
    SUBMITTED --reject---> REJECTED
    APPROVED  --pay-------> PAID          (expense)
    SUBMITTED/APPROVED --confirm_income--> PAID (income)

PAID and REJECTED are terminal. Every operation returns a new
``Transaction``; the input is never mutated and nothing is persisted here.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from buildledger.engine.validation import validate_transaction
from buildledger.exceptions import InvalidStateError, PermissionDeniedError, ValidationError
from buildledger.models.finance import (
    Actor,
    AuditAction,
    Permission,
    Transaction,
    TransactionStatus,
    TransactionType,
    has_permission,
)

if TYPE_CHECKING:
    from buildledger.audit import AuditTrail

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({TransactionStatus.PAID, TransactionStatus.REJECTED})

ALLOWED_TRANSITIONS: dict[TransactionStatus, frozenset[TransactionStatus]] = {
    TransactionStatus.DRAFT: frozenset({TransactionStatus.SUBMITTED}),
    TransactionStatus.SUBMITTED: frozenset(
        {TransactionStatus.APPROVED, TransactionStatus.REJECTED, TransactionStatus.PAID}
    ),
    TransactionStatus.APPROVED: frozenset({TransactionStatus.PAID}),
    TransactionStatus.PAID: frozenset(),
    TransactionStatus.REJECTED: frozenset(),
}


def can_transition(
    transaction_type: TransactionType,
    current: TransactionStatus,
    target: TransactionStatus,
) -> bool:
    """Return True if the graph allows ``current -> target`` for this type.

    SUBMITTED -> PAID exists only for income; an expense must be approved
    before it is paid.
    """
    if target not in ALLOWED_TRANSITIONS[current]:
        return False
    if current == TransactionStatus.SUBMITTED and target == TransactionStatus.PAID:
        return transaction_type == TransactionType.INCOME
    return True


class TransactionLifecycle:
    """Enforce permission and state rules for voucher transitions.

    Parameters
    ----------
    clock : Callable[[], datetime] | None
        Time source for ``updated_at``/``confirmed_at``. Defaults to
        ``datetime.now``.
    audit : AuditTrail | None
        Receives one entry per successful transition.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        audit: AuditTrail | None = None,
    ) -> None:
        self._clock = clock or datetime.now
        self._audit = audit

    def submit(self, transaction: Transaction, actor: Actor) -> Transaction:
        """Move a DRAFT voucher into the approval queue."""
        self._require_permission(actor, Permission.TRANS_CREATE, "submit", transaction)
        self._require_status(transaction, {TransactionStatus.DRAFT}, "submit")
        validate_transaction(transaction)

        now = self._clock()
        updated = replace(
            transaction,
            status=TransactionStatus.SUBMITTED,
            requester_id=transaction.requester_id or actor.actor_id,
            created_at=transaction.created_at or now,
            updated_at=now,
        )
        return self._record(AuditAction.SUBMIT, updated, actor)

    def approve(self, transaction: Transaction, actor: Actor) -> Transaction:
        """Approve a SUBMITTED voucher."""
        self._require_permission(actor, Permission.TRANS_APPROVE, "approve", transaction)
        self._require_status(transaction, {TransactionStatus.SUBMITTED}, "approve")

        updated = replace(
            transaction,
            status=TransactionStatus.APPROVED,
            approved_by=actor.actor_id,
            updated_at=self._clock(),
        )
        return self._record(AuditAction.APPROVE, updated, actor)

    def reject(self, transaction: Transaction, reason: str, actor: Actor) -> Transaction:
        """Reject a SUBMITTED voucher with a mandatory reason."""
        self._require_permission(actor, Permission.TRANS_APPROVE, "reject", transaction)
        if not (reason or "").strip():
            raise ValidationError("Rejection reason is required")
        self._require_status(transaction, {TransactionStatus.SUBMITTED}, "reject")

        updated = replace(
            transaction,
            status=TransactionStatus.REJECTED,
            rejection_reason=reason.strip(),
            updated_at=self._clock(),
        )
        return self._record(AuditAction.REJECT, updated, actor, metadata=updated.rejection_reason)

    def pay(self, transaction: Transaction, account_id: str, actor: Actor) -> Transaction:
        """Pay out an APPROVED expense from ``account_id``."""
        self._require_permission(actor, Permission.TRANS_PAY, "pay", transaction)
        if transaction.transaction_type != TransactionType.EXPENSE:
            raise InvalidStateError(
                f"Transaction {transaction.transaction_id} is not an expense; use confirm_income"
            )
        self._require_status(transaction, {TransactionStatus.APPROVED}, "pay")
        if not (account_id or "").strip():
            raise ValidationError("A cash account must be selected to pay")

        return self._settle(AuditAction.PAY, transaction, account_id, actor)

    def confirm_income(self, transaction: Transaction, account_id: str, actor: Actor) -> Transaction:
        """Confirm that money for an income voucher arrived in ``account_id``."""
        self._require_permission(actor, Permission.TRANS_PAY, "confirm_income", transaction)
        if transaction.transaction_type != TransactionType.INCOME:
            raise InvalidStateError(
                f"Transaction {transaction.transaction_id} is not an income; use pay"
            )
        self._require_status(
            transaction,
            {TransactionStatus.SUBMITTED, TransactionStatus.APPROVED},
            "confirm_income",
        )
        if not (account_id or "").strip():
            raise ValidationError("A receiving cash account must be selected")

        return self._settle(AuditAction.CONFIRM_INCOME, transaction, account_id, actor)

    def available_actions(self, transaction: Transaction, actor: Actor) -> list[str]:
        """Names of the operations ``actor`` could run on ``transaction`` now."""
        actions: list[str] = []
        status = transaction.status
        if status == TransactionStatus.DRAFT and has_permission(actor, Permission.TRANS_CREATE):
            actions.append("submit")
        if status == TransactionStatus.SUBMITTED and has_permission(actor, Permission.TRANS_APPROVE):
            actions.extend(["approve", "reject"])
        if has_permission(actor, Permission.TRANS_PAY):
            if transaction.transaction_type == TransactionType.EXPENSE and status == TransactionStatus.APPROVED:
                actions.append("pay")
            if transaction.transaction_type == TransactionType.INCOME and status in (
                TransactionStatus.SUBMITTED,
                TransactionStatus.APPROVED,
            ):
                actions.append("confirm_income")
        return actions

    def _settle(
        self,
        action: AuditAction,
        transaction: Transaction,
        account_id: str,
        actor: Actor,
    ) -> Transaction:
        now = self._clock()
        updated = replace(
            transaction,
            status=TransactionStatus.PAID,
            target_account_id=account_id.strip(),
            performed_by=actor.actor_id,
            confirmed_by=actor.actor_id,
            confirmed_at=now,
            updated_at=now,
        )
        return self._record(action, updated, actor, metadata=f"account={updated.target_account_id}")

    def _require_permission(
        self, actor: Actor, code: Permission, operation: str, transaction: Transaction
    ) -> None:
        if not has_permission(actor, code):
            logger.warning(
                "Denied %s on %s: actor %s lacks %s",
                operation,
                transaction.transaction_id,
                getattr(actor, "actor_id", None),
                code.value,
            )
            raise PermissionDeniedError(f"Actor lacks {code.value} required to {operation}")

    def _require_status(
        self,
        transaction: Transaction,
        allowed: set[TransactionStatus],
        operation: str,
    ) -> None:
        if transaction.status not in allowed:
            expected = ", ".join(sorted(s.value for s in allowed))
            raise InvalidStateError(
                f"Cannot {operation} transaction {transaction.transaction_id} "
                f"in status {transaction.status.value} (expected {expected})"
            )

    def _record(
        self,
        action: AuditAction,
        transaction: Transaction,
        actor: Actor,
        metadata: str | None = None,
    ) -> Transaction:
        logger.info(
            "Transaction %s %s by %s -> %s",
            transaction.transaction_id,
            action.value.lower(),
            actor.actor_id,
            transaction.status.value,
            extra={
                "transaction_id": transaction.transaction_id,
                "actor_id": actor.actor_id,
                "status": transaction.status.value,
            },
        )
        if self._audit is not None:
            self._audit.record(action, "TRANSACTION", transaction.transaction_id, actor, metadata)
        return transaction
