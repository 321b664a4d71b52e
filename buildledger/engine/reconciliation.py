"""Contract payment reconciliation."""

from dataclasses import dataclass, field
from typing import Iterable

from buildledger.models.finance import Contract, Transaction, TransactionStatus, TransactionType


@dataclass(frozen=True)
class ContractPaymentStatus:
    """Paid/collected position of one contract.

    ``total_paid``, ``paid_percent`` and ``remaining`` are the canonical
    values. The ``total_collected``, ``collected_percent`` and
    ``receivable`` properties are the same numbers under the names used for
    revenue contracts.
    """

    contract_id: str
    direction: TransactionType
    total_paid: int
    paid_percent: float
    remaining: int
    is_over_budget: bool
    related_transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    @property
    def is_revenue(self) -> bool:
        return self.direction == TransactionType.INCOME

    @property
    def total_collected(self) -> int:
        return self.total_paid

    @property
    def collected_percent(self) -> float:
        return self.paid_percent

    @property
    def receivable(self) -> int:
        return self.remaining


def reconcile(contract: Contract, transactions: Iterable[Transaction]) -> ContractPaymentStatus:
    """Match transactions to ``contract`` and compute its paid position.

    Only transactions in the contract's direction (income for REVENUE,
    expense otherwise) are related; only PAID ones count towards
    ``total_paid``. Over-collection on a revenue contract is not flagged.
    """
    direction = contract.direction
    related = tuple(
        t for t in transactions
        if t.contract_id == contract.contract_id and t.transaction_type == direction
    )
    total_paid = sum(t.amount for t in related if t.status == TransactionStatus.PAID)
    paid_percent = total_paid / contract.value * 100 if contract.value > 0 else 0.0

    return ContractPaymentStatus(
        contract_id=contract.contract_id,
        direction=direction,
        total_paid=total_paid,
        paid_percent=paid_percent,
        remaining=contract.value - total_paid,
        is_over_budget=direction == TransactionType.EXPENSE and total_paid > contract.value,
        related_transactions=related,
    )


def reconcile_all(
    contracts: Iterable[Contract], transactions: Iterable[Transaction]
) -> dict[str, ContractPaymentStatus]:
    """Reconcile every contract against the same snapshot."""
    snapshot = list(transactions)
    return {c.contract_id: reconcile(c, snapshot) for c in contracts}
