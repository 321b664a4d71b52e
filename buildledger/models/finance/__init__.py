"""Construction finance domain models."""

from buildledger.models.finance.account import CashAccount
from buildledger.models.finance.actor import Actor, has_permission
from buildledger.models.finance.audit import AuditEntry
from buildledger.models.finance.contract import Contract
from buildledger.models.finance.cost import (
    CostPlan,
    CostTarget,
    ManualRevenueItem,
    OutputTaxPlan,
)
from buildledger.models.finance.enums import (
    AccountOwner,
    AccountStatus,
    AccountType,
    AuditAction,
    ContractStatus,
    ContractType,
    CostCenterType,
    MappingKey,
    ObligationSource,
    ObligationStatus,
    PartnerType,
    Permission,
    ProjectStatus,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)
from buildledger.models.finance.project import Partner, Project
from buildledger.models.finance.transaction import Transaction

__all__ = [
    "AccountOwner",
    "AccountStatus",
    "AccountType",
    "Actor",
    "AuditAction",
    "AuditEntry",
    "CashAccount",
    "Contract",
    "ContractStatus",
    "ContractType",
    "CostCenterType",
    "CostPlan",
    "CostTarget",
    "ManualRevenueItem",
    "MappingKey",
    "ObligationSource",
    "ObligationStatus",
    "OutputTaxPlan",
    "Partner",
    "PartnerType",
    "Permission",
    "Project",
    "ProjectStatus",
    "Transaction",
    "TransactionScope",
    "TransactionStatus",
    "TransactionType",
    "has_permission",
]
