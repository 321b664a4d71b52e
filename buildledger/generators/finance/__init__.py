"""Construction finance generators."""

from buildledger.generators.finance.account import CashAccountGenerator
from buildledger.generators.finance.contract import ContractGenerator
from buildledger.generators.finance.project import PartnerGenerator, ProjectGenerator
from buildledger.generators.finance.transaction import TransactionGenerator

__all__ = [
    "CashAccountGenerator",
    "ContractGenerator",
    "PartnerGenerator",
    "ProjectGenerator",
    "TransactionGenerator",
]
