"""Cost-target allocation and tax-balance estimation.

Given a planned revenue base and a list of percentage-of-revenue cost
targets, classify the period's expenses into targets and report how much
documented (VAT-invoiced or manually confirmed) cost is still missing for
each. This is an advisory planning tool: it tolerates incomplete data and
never raises on it.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping

from buildledger.models.finance import (
    CostCenterType,
    CostTarget,
    MappingKey,
    OutputTaxPlan,
    Project,
    Transaction,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)

DEFAULT_COST_TARGETS: tuple[CostTarget, ...] = (
    CostTarget("t_material", "Vật tư (Có VAT)", 60, MappingKey.MATERIAL, "Hóa đơn đầu vào NVL"),
    CostTarget("t_labor", "Nhân công", 25, MappingKey.LABOR, "HĐ nhân công, lương"),
    CostTarget("t_office", "Văn phòng / Cố định", 5, MappingKey.OFFICE, "Điện, nước, thuê nhà"),
    CostTarget("t_other", "Khác", 5, MappingKey.OTHER, "Tiếp khách, đi lại"),
)

SALARY_KEYWORD = "lương"
MARKETING_KEYWORD = "marketing"


@dataclass(frozen=True)
class TargetBreakdown:
    """Progress of one cost target."""

    target: CostTarget
    target_amount: float
    actual_amount: int
    matched_transaction_ids: tuple[str, ...] = ()

    @property
    def missing_amount(self) -> float:
        return max(0.0, self.target_amount - self.actual_amount)

    @property
    def achieved_percent(self) -> float:
        if self.target_amount > 0:
            return self.actual_amount / self.target_amount * 100
        return 0.0


@dataclass(frozen=True)
class TaxBalance:
    """Aggregate result of a tax-balance estimation."""

    total_planned_revenue: int
    total_target_expense: float
    breakdown: tuple[TargetBreakdown, ...] = field(default_factory=tuple)

    @property
    def total_valid_expense(self) -> int:
        return sum(b.actual_amount for b in self.breakdown)

    @property
    def total_missing(self) -> float:
        return max(0.0, self.total_target_expense - self.total_valid_expense)

    def for_key(self, key: MappingKey) -> TargetBreakdown | None:
        """First breakdown line mapped to ``key``, if any."""
        for line in self.breakdown:
            if line.target.mapping_key == key:
                return line
        return None


def period_range(year: int, quarter: int | None = None, month: int | None = None) -> tuple[date, date]:
    """Inclusive date range of a quarter or a month.

    Exactly one of ``quarter`` (1-4) or ``month`` (1-12) must be given.
    """
    if (quarter is None) == (month is None):
        raise ValueError("Specify exactly one of quarter or month")
    if quarter is not None:
        if not 1 <= quarter <= 4:
            raise ValueError(f"Invalid quarter: {quarter}")
        first_month = (quarter - 1) * 3 + 1
        last_month = quarter * 3
    else:
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        first_month = last_month = month
    last_day = calendar.monthrange(year, last_month)[1]
    return date(year, first_month, 1), date(year, last_month, last_day)


def resolve_mapping_key(
    transaction: Transaction,
    overrides: Mapping[str, MappingKey] | None = None,
) -> MappingKey:
    """Classify an expense into exactly one cost bucket.

    Order: explicit override, material flag, labor flag or salary keyword
    in the category, marketing keyword in category or description,
    fixed-company scope or office cost center, otherwise OTHER.
    An override naming no known key is logged and ignored.
    """
    if overrides and transaction.transaction_id in overrides:
        try:
            return MappingKey(overrides[transaction.transaction_id])
        except ValueError:
            logger.warning(
                "Ignoring unknown allocation %r for %s",
                overrides[transaction.transaction_id],
                transaction.transaction_id,
            )
    if transaction.is_material_cost:
        return MappingKey.MATERIAL

    category = (transaction.category or "").lower()
    if transaction.is_labor_cost or SALARY_KEYWORD in category:
        return MappingKey.LABOR
    if MARKETING_KEYWORD in category or MARKETING_KEYWORD in (transaction.description or "").lower():
        return MappingKey.MARKETING
    if transaction.scope == TransactionScope.COMPANY_FIXED or transaction.cost_center_type == CostCenterType.OFFICE:
        return MappingKey.OFFICE
    return MappingKey.OTHER


def is_confirmed(transaction: Transaction, plan: OutputTaxPlan) -> bool:
    """True when an expense is documented well enough to count."""
    if transaction.has_vat_invoice:
        return True
    if transaction.is_labor_cost:
        return transaction.transaction_id in plan.confirmed_labor_ids
    return transaction.transaction_id in plan.confirmed_internal_ids


def expense_candidates(transactions: Iterable[Transaction], start: date, end: date) -> list[Transaction]:
    """Expenses dated inside ``[start, end]``, newest first."""
    found = [
        t for t in transactions
        if t.transaction_type == TransactionType.EXPENSE and start <= t.date <= end
    ]
    return sorted(found, key=lambda t: t.date, reverse=True)


def adhoc_receipts(transactions: Iterable[Transaction], start: date, end: date) -> list[Transaction]:
    """Paid non-project income inside ``[start, end]`` that can be added to revenue."""
    found = [
        t for t in transactions
        if t.transaction_type == TransactionType.INCOME
        and t.status == TransactionStatus.PAID
        and t.scope != TransactionScope.PROJECT
        and t.amount > 0
        and start <= t.date <= end
    ]
    return sorted(found, key=lambda t: t.date, reverse=True)


def planned_revenue(
    plan: OutputTaxPlan,
    projects: Iterable[Project],
    transactions: Iterable[Transaction],
) -> int:
    """Revenue base: selected project contract values, selected receipts and manual items."""
    project_revenue = sum(
        p.contract_total_value or 0 for p in projects if p.project_id in plan.selected_project_ids
    )
    receipt_revenue = sum(
        t.amount for t in transactions if t.transaction_id in plan.selected_transaction_ids
    )
    manual_revenue = sum(item.value for item in plan.manual_items)
    return project_revenue + receipt_revenue + manual_revenue


def estimate_tax_balance(
    plan: OutputTaxPlan,
    projects: Iterable[Project],
    transactions: Iterable[Transaction],
    period: tuple[date, date] | None = None,
    targets: Iterable[CostTarget] | None = None,
) -> TaxBalance:
    """Compare documented expenses in a period against revenue-based targets.

    Parameters
    ----------
    plan : OutputTaxPlan
        Revenue selections, confirmations and allocation overrides.
    projects : Iterable[Project]
        Projects whose contract value may be selected as revenue.
    transactions : Iterable[Transaction]
        Transaction snapshot.
    period : tuple[date, date] | None
        Inclusive date range for expenses; all expenses when omitted.
    targets : Iterable[CostTarget] | None
        Cost targets; ``DEFAULT_COST_TARGETS`` when omitted. An empty list
        gives an empty breakdown.

    Returns
    -------
    TaxBalance
        Per-target breakdown and totals.
    """
    snapshot = list(transactions)
    target_list = list(DEFAULT_COST_TARGETS) if targets is None else list(targets)
    revenue = planned_revenue(plan, projects, snapshot)

    if period is not None:
        expenses = expense_candidates(snapshot, *period)
    else:
        expenses = [t for t in snapshot if t.transaction_type == TransactionType.EXPENSE]

    # Resolve once per expense so each lands in exactly one bucket.
    confirmed_by_key: dict[MappingKey, list[Transaction]] = {}
    for t in expenses:
        if is_confirmed(t, plan):
            key = resolve_mapping_key(t, plan.custom_allocations)
            confirmed_by_key.setdefault(key, []).append(t)

    breakdown = []
    for target in target_list:
        matched = confirmed_by_key.get(MappingKey(target.mapping_key), [])
        breakdown.append(
            TargetBreakdown(
                target=target,
                target_amount=revenue * target.percent / 100,
                actual_amount=sum(t.amount for t in matched),
                matched_transaction_ids=tuple(t.transaction_id for t in matched),
            )
        )

    total_percent = sum(t.percent for t in target_list)
    return TaxBalance(
        total_planned_revenue=revenue,
        total_target_expense=revenue * total_percent / 100,
        breakdown=tuple(breakdown),
    )
