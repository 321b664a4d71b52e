"""Contract model for construction finance."""

from dataclasses import dataclass
from datetime import date

from buildledger.models.finance.enums import ContractStatus, ContractType, TransactionType


@dataclass
class Contract:
    """Legal agreement tied to one project and one partner.

    Contract types:
    - REVENUE: signed with the project owner, paid to us (income)
    - SUPPLIER_MATERIAL: material purchase (expense)
    - LABOR: labor team agreement (expense)
    - SUB_CONTRACT: subcontractor package (expense)
    """

    contract_id: str
    contract_type: ContractType
    value: int
    status: ContractStatus
    project_id: str
    partner_id: str
    code: str = ""
    name: str = ""
    signed_date: date | None = None

    @property
    def is_revenue(self) -> bool:
        return self.contract_type == ContractType.REVENUE

    @property
    def direction(self) -> TransactionType:
        """Transaction type that counts towards this contract."""
        return TransactionType.INCOME if self.is_revenue else TransactionType.EXPENSE
