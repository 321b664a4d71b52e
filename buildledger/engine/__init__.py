"""Business rules: workflow, balances, reconciliation and cost allocation."""

from buildledger.engine.allocation import (
    DEFAULT_COST_TARGETS,
    TargetBreakdown,
    TaxBalance,
    estimate_tax_balance,
    period_range,
    resolve_mapping_key,
)
from buildledger.engine.balance import account_movements, compute_balance, compute_balances
from buildledger.engine.lifecycle import TransactionLifecycle, can_transition
from buildledger.engine.obligations import InvoiceObligation, generate_invoice_obligations
from buildledger.engine.reconciliation import ContractPaymentStatus, reconcile, reconcile_all
from buildledger.engine.tax_kpi import (
    KpiFilters,
    calculate_cost_balance,
    calculate_project_cost_kpi,
    calculate_tax_kpi,
    default_cost_plan,
)
from buildledger.engine.validation import generate_code, validate_transaction

__all__ = [
    "DEFAULT_COST_TARGETS",
    "ContractPaymentStatus",
    "InvoiceObligation",
    "KpiFilters",
    "TargetBreakdown",
    "TaxBalance",
    "TransactionLifecycle",
    "account_movements",
    "calculate_cost_balance",
    "calculate_project_cost_kpi",
    "calculate_tax_kpi",
    "can_transition",
    "compute_balance",
    "compute_balances",
    "default_cost_plan",
    "estimate_tax_balance",
    "generate_code",
    "generate_invoice_obligations",
    "period_range",
    "reconcile",
    "reconcile_all",
    "resolve_mapping_key",
    "validate_transaction",
]
