"""In-memory ledger snapshot with referential integrity."""

import logging
from dataclasses import dataclass, field

from buildledger.engine.balance import compute_balance, compute_balances
from buildledger.engine.lifecycle import can_transition
from buildledger.engine.reconciliation import ContractPaymentStatus, reconcile
from buildledger.exceptions import (
    EntityNotFoundError,
    InvalidStateError,
    ReferentialIntegrityError,
)
from buildledger.models.finance import (
    CashAccount,
    Contract,
    Partner,
    Project,
    Transaction,
    TransactionStatus,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({TransactionStatus.PAID, TransactionStatus.REJECTED})


@dataclass
class LedgerStore:
    """Snapshot of the entities fetched from the backend.

    With ``strict`` (the default) dangling references raise
    ``ReferentialIntegrityError``; otherwise they are logged and accepted,
    which suits loading whatever the backend returns.
    """

    strict: bool = True

    # Master data
    projects: dict[str, Project] = field(default_factory=dict)
    partners: dict[str, Partner] = field(default_factory=dict)
    accounts: dict[str, CashAccount] = field(default_factory=dict)
    contracts: dict[str, Contract] = field(default_factory=dict)

    # Transactions keyed by id, insertion ordered
    transactions: dict[str, Transaction] = field(default_factory=dict)

    # Relationship indexes
    _account_transactions: dict[str, list[str]] = field(default_factory=dict)
    _contract_transactions: dict[str, list[str]] = field(default_factory=dict)
    _project_transactions: dict[str, list[str]] = field(default_factory=dict)

    def add_project(self, project: Project) -> None:
        """Add a project to the store."""
        self.projects[project.project_id] = project
        self._project_transactions.setdefault(project.project_id, [])

    def add_partner(self, partner: Partner) -> None:
        """Add a partner to the store."""
        self.partners[partner.partner_id] = partner

    def add_account(self, account: CashAccount) -> None:
        """Add a cash account to the store."""
        self.accounts[account.account_id] = account
        self._account_transactions.setdefault(account.account_id, [])

    def add_contract(self, contract: Contract) -> None:
        """Add a contract to the store."""
        if contract.project_id not in self.projects:
            self._violation(f"Project {contract.project_id} not found")
        if contract.partner_id not in self.partners:
            self._violation(f"Partner {contract.partner_id} not found")

        self.contracts[contract.contract_id] = contract
        self._contract_transactions.setdefault(contract.contract_id, [])

    def update_project(self, project: Project) -> None:
        """Replace a project, e.g. after a manual contract value edit."""
        if project.project_id not in self.projects:
            raise EntityNotFoundError(f"Project {project.project_id} not found")
        self.projects[project.project_id] = project

    def add_transaction(self, transaction: Transaction) -> None:
        """Add a transaction to the store, replacing any value with the same id."""
        self._check_references(transaction)
        existing = self.transactions.get(transaction.transaction_id)
        if existing is not None:
            self._unindex(existing)
        self.transactions[transaction.transaction_id] = transaction
        self._index(transaction)

    def update_transaction(self, transaction: Transaction) -> Transaction:
        """Replace a stored transaction and return the previous value.

        PAID and REJECTED transactions are frozen except for documentation
        fields; status changes must follow the workflow graph.
        """
        previous = self.check_update(transaction)
        self._unindex(previous)
        self.transactions[transaction.transaction_id] = transaction
        self._index(transaction)
        return previous

    def check_update(self, transaction: Transaction) -> Transaction:
        """Raise if ``update_transaction`` would refuse ``transaction``.

        Returns the stored value without changing anything.
        """
        previous = self.get_transaction(transaction.transaction_id)

        if previous.status != transaction.status and not can_transition(
            previous.transaction_type, previous.status, transaction.status
        ):
            raise InvalidStateError(
                f"Transaction {transaction.transaction_id} cannot move from "
                f"{previous.status.value} to {transaction.status.value}"
            )
        if previous.status in TERMINAL_STATUSES and (
            transaction.amount != previous.amount
            or transaction.transaction_type != previous.transaction_type
            or transaction.target_account_id != previous.target_account_id
        ):
            raise InvalidStateError(
                f"Transaction {transaction.transaction_id} is {previous.status.value}; "
                "amount, type and account are locked"
            )
        if transaction.status == TransactionStatus.PAID and not transaction.target_account_id:
            raise InvalidStateError(
                f"Transaction {transaction.transaction_id} cannot be PAID without a target account"
            )

        self._check_references(transaction)
        return previous

    def restore_transaction(self, transaction: Transaction) -> None:
        """Put back a previous value without workflow checks (rollback path)."""
        current = self.transactions.get(transaction.transaction_id)
        if current is not None:
            self._unindex(current)
        self.transactions[transaction.transaction_id] = transaction
        self._index(transaction)

    def remove_transaction(self, transaction_id: str) -> Transaction:
        """Delete a transaction explicitly and return it."""
        removed = self.get_transaction(transaction_id)
        self._unindex(removed)
        del self.transactions[transaction_id]
        return removed

    # Query methods
    def get_transaction(self, transaction_id: str) -> Transaction:
        """Get a transaction by id."""
        try:
            return self.transactions[transaction_id]
        except KeyError:
            raise EntityNotFoundError(f"Transaction {transaction_id} not found") from None

    def get_account_transactions(self, account_id: str) -> list[Transaction]:
        """Get all transactions targeting a cash account."""
        return [self.transactions[i] for i in self._account_transactions.get(account_id, [])]

    def get_contract_transactions(self, contract_id: str) -> list[Transaction]:
        """Get all transactions linked to a contract."""
        return [self.transactions[i] for i in self._contract_transactions.get(contract_id, [])]

    def get_project_transactions(self, project_id: str) -> list[Transaction]:
        """Get all transactions of a project."""
        return [self.transactions[i] for i in self._project_transactions.get(project_id, [])]

    def get_project_contracts(self, project_id: str) -> list[Contract]:
        """Get all contracts of a project."""
        return [c for c in self.contracts.values() if c.project_id == project_id]

    def balance(self, account_id: str) -> int:
        """Derived balance of one account, recomputed on every call."""
        if account_id not in self.accounts:
            raise EntityNotFoundError(f"Cash account {account_id} not found")
        return compute_balance(self.accounts[account_id], self.get_account_transactions(account_id))

    def balances(self) -> dict[str, int]:
        """Derived balances of all accounts."""
        return compute_balances(self.accounts.values(), self.transactions.values())

    def reconcile(self, contract_id: str) -> ContractPaymentStatus:
        """Payment position of one contract."""
        if contract_id not in self.contracts:
            raise EntityNotFoundError(f"Contract {contract_id} not found")
        return reconcile(self.contracts[contract_id], self.get_contract_transactions(contract_id))

    def pending(self, status: TransactionStatus = TransactionStatus.SUBMITTED) -> list[Transaction]:
        """Transactions waiting in ``status`` (the approval queue by default)."""
        return [t for t in self.transactions.values() if t.status == status]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "projects": len(self.projects),
            "partners": len(self.partners),
            "accounts": len(self.accounts),
            "contracts": len(self.contracts),
            "transactions": len(self.transactions),
        }

    def _check_references(self, transaction: Transaction) -> None:
        if transaction.target_account_id and transaction.target_account_id not in self.accounts:
            self._violation(f"Cash account {transaction.target_account_id} not found")
        if transaction.contract_id and transaction.contract_id not in self.contracts:
            self._violation(f"Contract {transaction.contract_id} not found")
        if transaction.project_id and transaction.project_id not in self.projects:
            self._violation(f"Project {transaction.project_id} not found")

    def _violation(self, message: str) -> None:
        if self.strict:
            raise ReferentialIntegrityError(message)
        logger.warning("Dangling reference accepted: %s", message)

    def _index(self, t: Transaction) -> None:
        if t.target_account_id:
            self._account_transactions.setdefault(t.target_account_id, []).append(t.transaction_id)
        if t.contract_id:
            self._contract_transactions.setdefault(t.contract_id, []).append(t.transaction_id)
        if t.project_id:
            self._project_transactions.setdefault(t.project_id, []).append(t.transaction_id)

    def _unindex(self, t: Transaction) -> None:
        for index, key in (
            (self._account_transactions, t.target_account_id),
            (self._contract_transactions, t.contract_id),
            (self._project_transactions, t.project_id),
        ):
            if key and t.transaction_id in index.get(key, []):
                index[key].remove(t.transaction_id)
