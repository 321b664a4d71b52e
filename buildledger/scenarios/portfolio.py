"""Project portfolio scenario: a consistent ledger driven through the workflow."""

import logging
import random
from typing import Any

from buildledger.audit import AuditTrail
from buildledger.engine.lifecycle import TransactionLifecycle
from buildledger.engine.tax_kpi import calculate_project_cost_kpi
from buildledger.generators.finance import (
    CashAccountGenerator,
    ContractGenerator,
    PartnerGenerator,
    ProjectGenerator,
    TransactionGenerator,
)
from buildledger.generators.pool import FakerPool
from buildledger.models.finance import (
    Actor,
    PartnerType,
    Permission,
    Transaction,
    TransactionType,
)
from buildledger.store import LedgerStore

logger = logging.getLogger(__name__)

REJECTION_REASONS = [
    "Thiếu hóa đơn VAT",
    "Sai số tiền so với báo giá",
    "Chưa có biên bản nghiệm thu",
    "Trùng phiếu đã duyệt",
]


class ProjectPortfolioScenario:
    """Generate a construction company's projects with their money flows.

    This scenario creates:
    - A cash drawer and bank accounts
    - Customers, suppliers and labor teams
    - Projects with revenue and expense contracts
    - Vouchers taken through submit, approve/reject and pay/confirm by
      three actors (staff, project manager, accountant)

    Every voucher passes through ``TransactionLifecycle``, so the store
    only ever holds states the workflow can reach.
    """

    def __init__(
        self,
        num_projects: int = 5,
        transactions_per_project: int = 30,
        paid_rate: float = 0.6,
        rejected_rate: float = 0.05,
        num_banks: int = 2,
        seed: int | None = None,
        audit: AuditTrail | None = None,
        locale: str = "vi_VN",
    ) -> None:
        """Initialize the portfolio scenario.

        Parameters
        ----------
        num_projects : int
            Number of projects to generate.
        transactions_per_project : int
            Average vouchers per project.
        paid_rate : float
            Share of vouchers settled (PAID).
        rejected_rate : float
            Share of vouchers rejected.
        num_banks : int
            Bank accounts besides the cash drawer.
        seed : int | None
            Random seed for reproducibility.
        audit : AuditTrail | None
            Trail receiving one entry per workflow step.
        locale : str
            Faker locale for names and addresses.
        """
        self.num_projects = num_projects
        self.transactions_per_project = transactions_per_project
        self.paid_rate = paid_rate
        self.rejected_rate = rejected_rate
        self.num_banks = num_banks
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.store = LedgerStore()
        self.audit = audit
        self.lifecycle = TransactionLifecycle(audit=audit)

        self.staff = Actor.with_permissions("emp_staff", Permission.TRANS_CREATE, name="Nhân viên")
        self.manager = Actor.with_permissions("emp_pm", Permission.TRANS_APPROVE, name="Chỉ huy trưởng")
        self.accountant = Actor.with_permissions("emp_acc", Permission.TRANS_PAY, name="Kế toán")

        pool = FakerPool(locale=locale, seed=seed)
        self._account_gen = CashAccountGenerator(seed=seed, pool=pool)
        self._partner_gen = PartnerGenerator(seed=seed, pool=pool)
        self._project_gen = ProjectGenerator(seed=seed, pool=pool)
        self._contract_gen = ContractGenerator(seed=seed, pool=pool)
        self._transaction_gen = TransactionGenerator(seed=seed, pool=pool)

    def generate(self) -> LedgerStore:
        """Generate all data for the portfolio.

        Returns
        -------
        LedgerStore
            Store containing all generated data.
        """
        logger.info("Starting portfolio scenario: %d projects", self.num_projects)

        for account in self._account_gen.generate_company_set(self.num_banks):
            self.store.add_account(account)

        suppliers = [self._partner_gen.generate(PartnerType.SUPPLIER) for _ in range(3)]
        labor_teams = [self._partner_gen.generate(PartnerType.LABOR) for _ in range(2)]
        for partner in suppliers + labor_teams:
            self.store.add_partner(partner)

        for _ in range(self.num_projects):
            self._generate_project(suppliers + labor_teams)

        logger.info("Generated portfolio: %s", self.store.summary())
        return self.store

    def _generate_project(self, partners: list) -> None:
        customer = self._partner_gen.generate(PartnerType.CUSTOMER)
        self.store.add_partner(customer)

        project = self._project_gen.generate()
        project.customer_name = customer.name
        self.store.add_project(project)

        contracts = list(self._contract_gen.generate_for_project(project, customer, partners))
        for contract in contracts:
            self.store.add_contract(contract)

        num_transactions = random.randint(
            max(1, self.transactions_per_project // 2),
            max(1, self.transactions_per_project * 3 // 2),
        )
        for _ in range(num_transactions):
            contract = random.choice(contracts) if random.random() < 0.5 else None
            draft = self._transaction_gen.generate(project.project_id, contract=contract)
            self._drive(draft)

        # Office overhead outside any project
        self._drive(self._transaction_gen.generate_company_expense())

    def _drive(self, draft: Transaction) -> None:
        """Add a DRAFT voucher and walk it through the workflow."""
        self.store.add_transaction(draft)
        tx = self._apply(self.lifecycle.submit(draft, self.staff))

        roll = random.random()
        if roll < self.rejected_rate:
            self._apply(self.lifecycle.reject(tx, random.choice(REJECTION_REASONS), self.manager))
            return
        if roll >= self.rejected_rate + self.paid_rate:
            # Left in the queue, half of them already approved
            if random.random() < 0.5:
                self._apply(self.lifecycle.approve(tx, self.manager))
            return

        account_id = random.choice(list(self.store.accounts))
        if tx.transaction_type == TransactionType.INCOME:
            if random.random() < 0.5:
                tx = self._apply(self.lifecycle.approve(tx, self.manager))
            self._apply(self.lifecycle.confirm_income(tx, account_id, self.accountant))
        else:
            tx = self._apply(self.lifecycle.approve(tx, self.manager))
            self._apply(self.lifecycle.pay(tx, account_id, self.accountant))

    def _apply(self, transaction: Transaction) -> Transaction:
        self.store.update_transaction(transaction)
        return transaction

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            Sink instances exposing ``write_batch``.
        """
        for sink in sinks:
            sink.write_batch("projects", list(self.store.projects.values()))
            sink.write_batch("partners", list(self.store.partners.values()))
            sink.write_batch("cash_accounts", list(self.store.accounts.values()))
            sink.write_batch("contracts", list(self.store.contracts.values()))
            sink.write_batch("transactions", list(self.store.transactions.values()))

        logger.info("Exported portfolio data to %d sinks", len(sinks))

    def get_project_view(self, project_id: str) -> dict[str, Any] | None:
        """Get the financial position of a single project.

        Parameters
        ----------
        project_id : str
            Project ID to retrieve.

        Returns
        -------
        dict[str, Any] | None
            Project, contract reconciliations and cost KPI, or None if the
            project does not exist.
        """
        project = self.store.projects.get(project_id)
        if not project:
            return None

        transactions = self.store.get_project_transactions(project_id)
        contracts = self.store.get_project_contracts(project_id)
        return {
            "project": project,
            "contracts": [self.store.reconcile(c.contract_id) for c in contracts],
            "transactions": transactions,
            "cost_kpi": calculate_project_cost_kpi(project, transactions),
        }
