"""Cash account model for construction finance."""

from dataclasses import dataclass

from buildledger.models.finance.enums import AccountOwner, AccountStatus, AccountType


@dataclass
class CashAccount:
    """A named pool of money: the company cash drawer or a bank account.

    There is deliberately no ``balance`` field. The balance is derived from
    ``initial_balance`` and the PAID transactions that target the account,
    see :func:`buildledger.engine.balance.compute_balance`.
    """

    account_id: str
    bank_name: str
    account_name: str
    account_type: AccountType
    initial_balance: int = 0
    status: AccountStatus = AccountStatus.ACTIVE
    owner: AccountOwner = AccountOwner.COMPANY
    account_number: str | None = None
