"""Cash account generator for construction finance."""

import random
from typing import Iterator

from buildledger.generators.base import BaseGenerator
from buildledger.generators.pool import FakerPool
from buildledger.models.finance import AccountOwner, AccountType, CashAccount


class CashAccountGenerator(BaseGenerator):
    """Generate the company cash drawer and bank accounts."""

    BANKS = ["Vietcombank", "BIDV", "VietinBank", "Techcombank", "MB Bank", "ACB", "VPBank"]

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)

    def generate(self, account_type: AccountType = AccountType.BANK) -> CashAccount:
        """Generate a single account.

        Parameters
        ----------
        account_type : AccountType
            CASH for a cash drawer, BANK for a bank account.

        Returns
        -------
        CashAccount
            Generated account with an opening balance in whole VND.
        """
        if account_type == AccountType.CASH:
            return CashAccount(
                account_id=self.pool.uuid(),
                bank_name="Tiền mặt",
                account_name="Quỹ tiền mặt công ty",
                account_type=AccountType.CASH,
                initial_balance=random.randint(10, 200) * 1_000_000,
            )

        bank = random.choice(self.BANKS)
        owner = random.choices(list(AccountOwner), weights=[0.8, 0.2], k=1)[0]
        holder = self.pool.company() if owner == AccountOwner.COMPANY else self.pool.name()
        return CashAccount(
            account_id=self.pool.uuid(),
            bank_name=bank,
            account_name=holder,
            account_type=AccountType.BANK,
            initial_balance=random.randint(0, 2_000) * 1_000_000,
            owner=owner,
            account_number=f"{random.randint(10**9, 10**13 - 1)}",
        )

    def generate_company_set(self, num_banks: int = 2) -> Iterator[CashAccount]:
        """One cash drawer followed by ``num_banks`` bank accounts."""
        yield self.generate(AccountType.CASH)
        for _ in range(num_banks):
            yield self.generate(AccountType.BANK)
