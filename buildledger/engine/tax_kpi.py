"""Tax and cost-ratio KPIs over a transaction snapshot."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from buildledger.models.finance import (
    Contract,
    ContractStatus,
    ContractType,
    CostPlan,
    Project,
    Transaction,
    TransactionStatus,
    TransactionType,
)

VAT_REQUIRED_THRESHOLD = 200_000
DEFAULT_MATERIAL_RATIO = 50.0
DEFAULT_LABOR_RATIO = 30.0


@dataclass
class KpiFilters:
    """Optional filters applied before aggregation. ``None`` means no filter."""

    start_date: date | None = None
    end_date: date | None = None
    project_id: str | None = None
    partner_id: str | None = None
    account_id: str | None = None
    only_paid: bool = False

    def matches(self, t: Transaction) -> bool:
        if self.start_date and t.date < self.start_date:
            return False
        if self.end_date and t.date > self.end_date:
            return False
        if self.project_id and t.project_id != self.project_id:
            return False
        if self.partner_id and t.partner_id != self.partner_id:
            return False
        if self.account_id and t.target_account_id != self.account_id:
            return False
        if self.only_paid and t.status != TransactionStatus.PAID:
            return False
        return True


@dataclass
class TaxKpiStats:
    """VAT compliance summary."""

    revenue: int = 0
    total_expense: int = 0
    expense_with_vat: int = 0
    vat_input_ratio: float = 0.0
    total_contract_value: int = 0
    missing_vat: list[Transaction] = field(default_factory=list)
    missing_labor_contract: list[Transaction] = field(default_factory=list)
    missing_material_invoice_count: int = 0
    missing_files_count: int = 0

    @property
    def missing_vat_amount(self) -> int:
        return sum(t.amount for t in self.missing_vat)

    @property
    def missing_labor_contract_amount(self) -> int:
        return sum(t.amount for t in self.missing_labor_contract)


@dataclass
class ProjectCostKpi:
    project_id: str
    project_name: str
    contract_total_value: int
    material_cost: int
    labor_cost: int
    material_ratio: float
    labor_ratio: float
    warnings: list[str] = field(default_factory=list)


@dataclass
class CostSnapshot:
    period: str
    actual_revenue: int
    actual_material: int
    actual_labor: int
    actual_overhead: int
    ratio_material: float
    ratio_labor: float
    ratio_overhead: float
    plan: CostPlan
    warnings: list[str] = field(default_factory=list)


def calculate_tax_kpi(
    transactions: Iterable[Transaction],
    contracts: Iterable[Contract],
    filters: KpiFilters | None = None,
) -> TaxKpiStats:
    """Aggregate VAT coverage and documentation gaps.

    The VAT input ratio is measured against the value of signed or
    completed revenue contracts, falling back to collected revenue when no
    such contract exists.
    """
    filters = filters or KpiFilters()
    stats = TaxKpiStats()

    for t in transactions:
        if not filters.matches(t):
            continue
        if t.transaction_type == TransactionType.INCOME:
            stats.revenue += t.amount
            continue

        stats.total_expense += t.amount
        if t.has_vat_invoice:
            stats.expense_with_vat += t.amount
        elif t.is_material_cost or t.amount > VAT_REQUIRED_THRESHOLD:
            stats.missing_vat.append(t)

        if t.is_labor_cost and not t.contract_id:
            stats.missing_labor_contract.append(t)
        if t.is_material_cost and not t.has_vat_invoice:
            stats.missing_material_invoice_count += 1
        if not t.attachments:
            stats.missing_files_count += 1

    stats.total_contract_value = sum(
        c.value for c in contracts
        if c.contract_type == ContractType.REVENUE
        and c.status in (ContractStatus.SIGNED, ContractStatus.COMPLETED)
        and (not filters.project_id or c.project_id == filters.project_id)
    )
    base = stats.total_contract_value if stats.total_contract_value > 0 else stats.revenue
    stats.vat_input_ratio = stats.expense_with_vat / base * 100 if base > 0 else 0.0
    return stats


def calculate_project_cost_kpi(
    project: Project,
    transactions: Iterable[Transaction],
    material_target: float = DEFAULT_MATERIAL_RATIO,
    labor_target: float = DEFAULT_LABOR_RATIO,
) -> ProjectCostKpi:
    """Material and labor cost ratios of a project against its contract value."""
    paid = [
        t for t in transactions
        if t.project_id == project.project_id and t.status == TransactionStatus.PAID
    ]
    material = sum(t.amount for t in paid if t.is_material_cost)
    labor = sum(t.amount for t in paid if t.is_labor_cost)
    value = project.contract_total_value or 0

    material_ratio = material / value * 100 if value > 0 else 0.0
    labor_ratio = labor / value * 100 if value > 0 else 0.0

    warnings = []
    if material_ratio > material_target:
        warnings.append(f"Chi phí vật tư ({material_ratio:.1f}%) vượt định mức ({material_target:g}%)")
    if labor_ratio > labor_target:
        warnings.append(f"Chi phí nhân công ({labor_ratio:.1f}%) vượt định mức ({labor_target:g}%)")

    return ProjectCostKpi(
        project_id=project.project_id,
        project_name=project.name,
        contract_total_value=value,
        material_cost=material,
        labor_cost=labor,
        material_ratio=material_ratio,
        labor_ratio=labor_ratio,
        warnings=warnings,
    )


def calculate_cost_balance(
    transactions: Iterable[Transaction],
    plan: CostPlan,
    period: str | None = None,
) -> CostSnapshot:
    """Actual material/labor/overhead ratios of paid flows versus the plan."""
    snapshot = [t for t in transactions if t.status == TransactionStatus.PAID]
    revenue = sum(t.amount for t in snapshot if t.transaction_type == TransactionType.INCOME)
    expenses = [t for t in snapshot if t.transaction_type == TransactionType.EXPENSE]

    material = sum(t.amount for t in expenses if t.is_material_cost)
    labor = sum(t.amount for t in expenses if t.is_labor_cost and not t.is_material_cost)
    overhead = sum(t.amount for t in expenses if not t.is_material_cost and not t.is_labor_cost)

    base = revenue if revenue > 0 else 1
    ratio_material = material / base * 100
    ratio_labor = labor / base * 100
    ratio_overhead = overhead / base * 100

    warnings = []
    if ratio_material > plan.target_material:
        warnings.append(
            f"Chi phí VẬT TƯ ({ratio_material:.1f}%) vượt định mức chuẩn ({plan.target_material:g}%)"
        )
    if ratio_labor > plan.target_labor:
        warnings.append(
            f"Chi phí NHÂN CÔNG ({ratio_labor:.1f}%) vượt định mức chuẩn ({plan.target_labor:g}%)"
        )
    if ratio_overhead > plan.target_overhead:
        warnings.append(
            f"Chi phí QUẢN LÝ ({ratio_overhead:.1f}%) vượt định mức chuẩn ({plan.target_overhead:g}%)"
        )
    if revenue > 0 and material + labor + overhead > revenue:
        warnings.append("CẢNH BÁO NGUY HIỂM: Đang LỖ thực tế (Chi > Thu)")

    return CostSnapshot(
        period=period or str(datetime.now().year),
        actual_revenue=revenue,
        actual_material=material,
        actual_labor=labor,
        actual_overhead=overhead,
        ratio_material=ratio_material,
        ratio_labor=ratio_labor,
        ratio_overhead=ratio_overhead,
        plan=plan,
        warnings=warnings,
    )


def default_cost_plan(year: int | None = None) -> CostPlan:
    """Standard cost norms used when the backend has none configured."""
    return CostPlan(
        plan_id="plan_default",
        year=year or datetime.now().year,
        name="Định mức tiêu chuẩn",
    )
