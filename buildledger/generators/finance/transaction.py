"""Transaction (voucher) generator for construction finance."""

import random
from datetime import date, timedelta
from typing import Iterator

from buildledger.engine.validation import generate_code
from buildledger.generators.base import BaseGenerator
from buildledger.generators.pool import FakerPool
from buildledger.models.finance import (
    Contract,
    ContractType,
    Transaction,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)


class TransactionGenerator(BaseGenerator):
    """Generate DRAFT vouchers that pass submit-time validation.

    Expense amounts follow a Pareto distribution, so most vouchers are
    small purchases and a few are large contract installments.
    """

    EXPENSE_CATEGORIES = [
        ("Vật tư xây dựng", "material"),
        ("Nhân công", "labor"),
        ("Máy thi công", None),
        ("Vận chuyển", None),
        ("Chi phí khác", None),
    ]
    EXPENSE_WEIGHTS = [0.45, 0.30, 0.10, 0.10, 0.05]

    COMPANY_CATEGORIES = ["Lương văn phòng", "Marketing online", "Thuê văn phòng", "Điện nước"]

    MATERIALS = ["xi măng", "thép", "cát", "gạch", "sơn", "ống nước", "dây điện", "đá"]

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)
        self._sequence = 0

    def generate(
        self,
        project_id: str,
        transaction_type: TransactionType | None = None,
        contract: Contract | None = None,
        when: date | None = None,
    ) -> Transaction:
        """Generate a single project voucher.

        Parameters
        ----------
        project_id : str
            Project the voucher belongs to.
        transaction_type : TransactionType | None
            INCOME or EXPENSE; random (70% expense) when omitted.
        contract : Contract | None
            Contract to attribute the voucher to. Its direction wins over
            ``transaction_type``.
        when : date | None
            Voucher date; within the last 180 days when omitted.

        Returns
        -------
        Transaction
            A DRAFT voucher.
        """
        if contract is not None:
            transaction_type = contract.direction
        elif transaction_type is None:
            transaction_type = random.choices(
                [TransactionType.EXPENSE, TransactionType.INCOME], weights=[0.7, 0.3], k=1
            )[0]
        when = when or date.today() - timedelta(days=random.randint(0, 180))

        if transaction_type == TransactionType.INCOME:
            amount = self._income_amount(contract)
            category, description = "Thu tiền khách hàng", f"Thu tiền đợt {random.randint(1, 6)}"
            flags: dict = {}
        else:
            amount = self._expense_amount(contract)
            category, description, flags = self._expense_details(contract)

        has_vat = transaction_type == TransactionType.EXPENSE and random.random() < 0.6
        self._sequence += 1
        return Transaction(
            transaction_id=self.pool.uuid(),
            date=when,
            transaction_type=transaction_type,
            amount=amount,
            status=TransactionStatus.DRAFT,
            scope=TransactionScope.PROJECT,
            category=category,
            description=description,
            code=generate_code(transaction_type, when, self._sequence),
            project_id=project_id,
            partner_id=contract.partner_id if contract else None,
            contract_id=contract.contract_id if contract else None,
            has_vat_invoice=has_vat,
            vat_amount=round(amount * 0.08) if has_vat else None,
            **flags,
        )

    def generate_company_expense(self, when: date | None = None) -> Transaction:
        """Generate a DRAFT overhead voucher not tied to any project."""
        category = random.choice(self.COMPANY_CATEGORIES)
        when = when or date.today() - timedelta(days=random.randint(0, 180))
        self._sequence += 1
        return Transaction(
            transaction_id=self.pool.uuid(),
            date=when,
            transaction_type=TransactionType.EXPENSE,
            amount=random.randint(2, 60) * 1_000_000,
            status=TransactionStatus.DRAFT,
            scope=TransactionScope.COMPANY_FIXED,
            category=category,
            description=f"{category} tháng {when.month}",
            code=generate_code(TransactionType.EXPENSE, when, self._sequence),
            is_payroll=category.startswith("Lương"),
        )

    def generate_for_contract(self, contract: Contract, count: int) -> Iterator[Transaction]:
        """Generate ``count`` installments against one contract."""
        for _ in range(count):
            yield self.generate(contract.project_id, contract=contract)

    def _income_amount(self, contract: Contract | None) -> int:
        if contract is not None:
            return int(round(contract.value * random.uniform(0.1, 0.35), -5))
        return random.randint(50, 2_000) * 1_000_000

    def _expense_amount(self, contract: Contract | None) -> int:
        if contract is not None:
            return int(round(contract.value * random.uniform(0.1, 0.4), -5))
        amount = random.paretovariate(1.2) * 500_000
        return int(round(min(amount, 500_000_000), -3))

    def _expense_details(self, contract: Contract | None) -> tuple[str, str, dict]:
        if contract is not None and contract.contract_type == ContractType.LABOR:
            return "Nhân công", f"Thanh toán nhân công {contract.name}", {"is_labor_cost": True}
        if contract is not None and contract.contract_type == ContractType.SUPPLIER_MATERIAL:
            material = random.choice(self.MATERIALS)
            return "Vật tư xây dựng", f"Mua {material}", {"is_material_cost": True}
        if contract is not None:
            return "Thầu phụ", f"Thanh toán {contract.name}", {}

        category, group = random.choices(self.EXPENSE_CATEGORIES, weights=self.EXPENSE_WEIGHTS, k=1)[0]
        if group == "material":
            return category, f"Mua {random.choice(self.MATERIALS)}", {"is_material_cost": True}
        if group == "labor":
            return category, f"Trả công {self.pool.name()}", {"is_labor_cost": True}
        return category, f"{category} công trình", {}
