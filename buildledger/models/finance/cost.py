"""Cost plan and tax-balance planning models."""

from dataclasses import dataclass, field

from buildledger.models.finance.enums import MappingKey


@dataclass
class CostTarget:
    """Budget line expressed as a percentage of revenue."""

    target_id: str
    label: str
    percent: float
    mapping_key: MappingKey
    description: str = ""


@dataclass
class CostPlan:
    """Yearly cost norms.

    The four ratio fields are the older fixed plan (material, labor,
    overhead, profit); ``targets`` is the configurable list of budget lines
    used by the tax-balance estimator.
    """

    plan_id: str
    year: int
    name: str
    target_material: float = 65.0
    target_labor: float = 23.0
    target_overhead: float = 10.0
    target_profit: float = 2.0
    targets: list[CostTarget] = field(default_factory=list)


@dataclass
class ManualRevenueItem:
    """Revenue entered by hand into an output tax plan."""

    item_id: str
    name: str
    value: int


@dataclass
class OutputTaxPlan:
    """User selections for one tax-balancing period.

    Revenue is the sum of the selected projects' contract values, the
    selected ad-hoc receipts and the manual items. Expenses without a VAT
    invoice only count once confirmed through one of the two id sets.
    """

    selected_project_ids: set[str] = field(default_factory=set)
    selected_transaction_ids: set[str] = field(default_factory=set)
    manual_items: list[ManualRevenueItem] = field(default_factory=list)
    confirmed_labor_ids: set[str] = field(default_factory=set)
    confirmed_internal_ids: set[str] = field(default_factory=set)
    custom_allocations: dict[str, MappingKey] = field(default_factory=dict)
