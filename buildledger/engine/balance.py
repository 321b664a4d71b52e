"""Cash account balance derivation.

Balances are never stored. They are a pure function of the account's
initial balance and the PAID transactions that target it, so they must be
recomputed whenever the transaction snapshot changes.
"""

from typing import Iterable

from buildledger.models.finance import CashAccount, Transaction, TransactionStatus


def compute_balance(account: CashAccount, transactions: Iterable[Transaction]) -> int:
    """Return the current balance of ``account``.

    Parameters
    ----------
    account : CashAccount
        Account whose balance is derived.
    transactions : Iterable[Transaction]
        Transaction snapshot. Only PAID transactions targeting the account
        contribute; income adds, expense subtracts.

    Returns
    -------
    int
        Balance in whole VND.
    """
    balance = account.initial_balance or 0
    for t in transactions:
        if t.target_account_id == account.account_id and t.status == TransactionStatus.PAID:
            balance += t.signed_amount
    return balance


def compute_balances(
    accounts: Iterable[CashAccount], transactions: Iterable[Transaction]
) -> dict[str, int]:
    """Return ``{account_id: balance}`` for every account in one pass."""
    balances = {a.account_id: a.initial_balance or 0 for a in accounts}
    for t in transactions:
        if t.status != TransactionStatus.PAID:
            continue
        if t.target_account_id in balances:
            balances[t.target_account_id] += t.signed_amount
    return balances


def account_movements(account_id: str, transactions: Iterable[Transaction]) -> list[Transaction]:
    """PAID transactions that moved money through ``account_id``, oldest first."""
    moved = [
        t for t in transactions
        if t.target_account_id == account_id and t.status == TransactionStatus.PAID
    ]
    return sorted(moved, key=lambda t: t.date)
