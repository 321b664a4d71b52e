"""Transaction (voucher) model for construction finance."""

from dataclasses import dataclass, field
from datetime import date, datetime

from buildledger.models.base import Attachment
from buildledger.models.finance.enums import (
    CostCenterType,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)


@dataclass
class Transaction:
    """A monetary event: a receipt (phiếu thu) or a payment voucher (phiếu chi).

    Amounts are whole VND. ``target_account_id`` is the cash drawer or bank
    account the money moved through and is only guaranteed once the
    transaction is PAID.
    """

    transaction_id: str
    date: date
    transaction_type: TransactionType
    amount: int
    status: TransactionStatus
    scope: TransactionScope = TransactionScope.PROJECT
    category: str = ""
    description: str = ""
    code: str | None = None

    # Associations
    target_account_id: str | None = None
    project_id: str | None = None
    partner_id: str | None = None
    employee_id: str | None = None
    contract_id: str | None = None
    cost_center_id: str | None = None
    cost_center_type: CostCenterType | None = None

    # Tax / cost classification
    has_vat_invoice: bool = False
    vat_amount: int | None = None
    is_material_cost: bool = False
    is_labor_cost: bool = False
    is_payroll: bool = False
    attachments: list[Attachment] = field(default_factory=list)

    # Workflow trail
    requester_id: str | None = None
    performed_by: str | None = None
    approved_by: str | None = None
    confirmed_by: str | None = None
    confirmed_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_income(self) -> bool:
        return self.transaction_type == TransactionType.INCOME

    @property
    def is_paid(self) -> bool:
        return self.status == TransactionStatus.PAID

    @property
    def signed_amount(self) -> int:
        """Amount signed by direction: positive for income, negative for expense."""
        return self.amount if self.is_income else -self.amount
