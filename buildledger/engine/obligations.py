"""Input VAT invoice obligations.

Every signed supplier, labor or sub-contract obliges us to collect VAT
invoices up to its value. Large expenses paid without a contract are
grouped per partner into obligations of their own.
"""

from dataclasses import dataclass, field
from typing import Iterable

from buildledger.models.finance import (
    Contract,
    ContractStatus,
    ContractType,
    ObligationSource,
    ObligationStatus,
    Partner,
    Transaction,
    TransactionType,
)

ORPHAN_EXPENSE_THRESHOLD = 200_000
UNKNOWN_PARTNER = "unknown_partner"

INPUT_CONTRACT_TYPES = frozenset(
    {ContractType.SUPPLIER_MATERIAL, ContractType.LABOR, ContractType.SUB_CONTRACT}
)


@dataclass
class InvoiceObligation:
    """Amount of input invoices owed against a contract or a partner."""

    obligation_id: str
    source_type: ObligationSource
    source_id: str
    source_name: str
    partner_id: str
    partner_name: str
    total_amount: int
    collected_amount: int
    linked_transaction_ids: list[str] = field(default_factory=list)

    @property
    def missing_amount(self) -> int:
        return max(0, self.total_amount - self.collected_amount)

    @property
    def status(self) -> ObligationStatus:
        if self.collected_amount >= self.total_amount:
            return ObligationStatus.FULFILLED
        if self.collected_amount > 0:
            return ObligationStatus.PARTIAL
        return ObligationStatus.MISSING


def generate_invoice_obligations(
    contracts: Iterable[Contract],
    transactions: Iterable[Transaction],
    partners: Iterable[Partner] = (),
) -> list[InvoiceObligation]:
    """Build invoice obligations, largest missing amount first."""
    snapshot = list(transactions)
    partner_names = {p.partner_id: p.name for p in partners}
    obligations: list[InvoiceObligation] = []

    for contract in contracts:
        if contract.contract_type not in INPUT_CONTRACT_TYPES or contract.status == ContractStatus.DRAFT:
            continue
        linked = [
            t for t in snapshot
            if t.contract_id == contract.contract_id
            and t.transaction_type == TransactionType.EXPENSE
            and t.has_vat_invoice
        ]
        obligations.append(
            InvoiceObligation(
                obligation_id=f"obl_c_{contract.contract_id}",
                source_type=ObligationSource.CONTRACT,
                source_id=contract.contract_id,
                source_name=contract.name,
                partner_id=contract.partner_id,
                partner_name=partner_names.get(contract.partner_id, "Unknown"),
                total_amount=contract.value,
                collected_amount=sum(t.amount for t in linked),
                linked_transaction_ids=[t.transaction_id for t in linked],
            )
        )

    orphans: dict[str, list[Transaction]] = {}
    for t in snapshot:
        if (
            t.transaction_type == TransactionType.EXPENSE
            and not t.contract_id
            and t.amount > ORPHAN_EXPENSE_THRESHOLD
            and not t.is_payroll
        ):
            orphans.setdefault(t.partner_id or UNKNOWN_PARTNER, []).append(t)

    for partner_id, group in orphans.items():
        total = sum(t.amount for t in group)
        if total <= 0:
            continue
        known = partner_id != UNKNOWN_PARTNER
        obligations.append(
            InvoiceObligation(
                obligation_id=f"obl_orph_{partner_id}",
                source_type=ObligationSource.ORPHAN_EXPENSE,
                source_id=partner_id,
                source_name="Chi phí lẻ (Không HĐ)",
                partner_id=partner_id if known else "",
                partner_name=partner_names.get(partner_id, "Vãng lai/Khác"),
                total_amount=total,
                collected_amount=sum(t.amount for t in group if t.has_vat_invoice),
                linked_transaction_ids=[t.transaction_id for t in group],
            )
        )

    return sorted(obligations, key=lambda o: o.missing_amount, reverse=True)
