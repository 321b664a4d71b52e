"""Tests for cost-target allocation and tax-balance estimation."""

import logging
from datetime import date

import pytest

from buildledger.engine.allocation import (
    DEFAULT_COST_TARGETS,
    adhoc_receipts,
    estimate_tax_balance,
    expense_candidates,
    is_confirmed,
    period_range,
    planned_revenue,
    resolve_mapping_key,
)
from buildledger.models.finance import (
    CostCenterType,
    CostTarget,
    ManualRevenueItem,
    MappingKey,
    OutputTaxPlan,
    Project,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)


@pytest.fixture
def project() -> Project:
    return Project("prj-001", "CT24-001", "Nhà phố Quận 7", contract_total_value=100_000_000)


@pytest.fixture
def plan() -> OutputTaxPlan:
    return OutputTaxPlan(selected_project_ids={"prj-001"})


class TestPeriodRange:
    """Tests for period_range."""

    def test_quarter(self) -> None:
        assert period_range(2024, quarter=1) == (date(2024, 1, 1), date(2024, 3, 31))
        assert period_range(2024, quarter=4) == (date(2024, 10, 1), date(2024, 12, 31))

    def test_month_handles_leap_year(self) -> None:
        assert period_range(2024, month=2) == (date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize("kwargs", [{}, {"quarter": 1, "month": 1}, {"quarter": 5}, {"month": 13}])
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            period_range(2024, **kwargs)


class TestResolveMappingKey:
    """Tests for resolve_mapping_key."""

    def test_material_flag(self, make_tx) -> None:
        assert resolve_mapping_key(make_tx(is_material_cost=True, is_labor_cost=True)) == MappingKey.MATERIAL

    def test_labor_flag_or_salary_keyword(self, make_tx) -> None:
        assert resolve_mapping_key(make_tx(is_labor_cost=True, category="")) == MappingKey.LABOR
        assert resolve_mapping_key(make_tx(category="Lương văn phòng")) == MappingKey.LABOR

    def test_marketing_keyword(self, make_tx) -> None:
        assert resolve_mapping_key(make_tx(category="Marketing online")) == MappingKey.MARKETING
        assert resolve_mapping_key(make_tx(category="Quảng cáo", description="Chạy marketing Facebook")) == MappingKey.MARKETING

    def test_office(self, make_tx) -> None:
        assert resolve_mapping_key(make_tx(category="Điện", scope=TransactionScope.COMPANY_FIXED)) == MappingKey.OFFICE
        assert resolve_mapping_key(make_tx(category="Điện", cost_center_type=CostCenterType.OFFICE)) == MappingKey.OFFICE

    def test_other(self, make_tx) -> None:
        assert resolve_mapping_key(make_tx(category="Tiếp khách")) == MappingKey.OTHER

    def test_override_wins(self, make_tx) -> None:
        tx = make_tx(is_material_cost=True)

        assert resolve_mapping_key(tx, {"tx-001": MappingKey.OTHER}) == MappingKey.OTHER


    def test_unknown_override_falls_back(self, make_tx, caplog) -> None:
        tx = make_tx("x", is_material_cost=True)

        with caplog.at_level(logging.WARNING, logger="buildledger.engine.allocation"):
            key = resolve_mapping_key(tx, {"x": "FUEL"})

        assert key == MappingKey.MATERIAL
        assert "FUEL" in caplog.text


class TestIsConfirmed:
    """Tests for is_confirmed."""

    def test_vat_invoice_always_counts(self, make_tx, plan) -> None:
        assert is_confirmed(make_tx(has_vat_invoice=True), plan)

    def test_labor_needs_labor_confirmation(self, make_tx, plan) -> None:
        tx = make_tx(is_labor_cost=True)

        assert not is_confirmed(tx, plan)
        plan.confirmed_internal_ids.add("tx-001")
        assert not is_confirmed(tx, plan)
        plan.confirmed_labor_ids.add("tx-001")
        assert is_confirmed(tx, plan)

    def test_internal_confirmation(self, make_tx, plan) -> None:
        tx = make_tx()
        plan.confirmed_internal_ids.add("tx-001")

        assert is_confirmed(tx, plan)


class TestCandidates:
    """Tests for expense_candidates and adhoc_receipts."""

    def test_expense_candidates_in_period_newest_first(self, make_tx) -> None:
        transactions = [
            make_tx("old", date=date(2024, 1, 5)),
            make_tx("new", date=date(2024, 3, 31)),
            make_tx("outside", date=date(2024, 4, 1)),
            make_tx("income", transaction_type=TransactionType.INCOME, date=date(2024, 2, 1)),
        ]

        found = expense_candidates(transactions, *period_range(2024, quarter=1))

        assert [t.transaction_id for t in found] == ["new", "old"]

    def test_adhoc_receipts(self, make_tx) -> None:
        transactions = [
            make_tx("ok", TransactionType.INCOME, 5_000_000, TransactionStatus.PAID,
                    scope=TransactionScope.OTHER, date=date(2024, 2, 1)),
            make_tx("project", TransactionType.INCOME, 5_000_000, TransactionStatus.PAID, date=date(2024, 2, 1)),
            make_tx("unpaid", TransactionType.INCOME, 5_000_000, TransactionStatus.APPROVED,
                    scope=TransactionScope.OTHER, date=date(2024, 2, 1)),
        ]

        found = adhoc_receipts(transactions, *period_range(2024, quarter=1))

        assert [t.transaction_id for t in found] == ["ok"]


class TestPlannedRevenue:
    """Tests for planned_revenue."""

    def test_sums_three_sources(self, project, make_tx) -> None:
        receipt = make_tx("rcpt", TransactionType.INCOME, 7_000_000, TransactionStatus.PAID)
        plan = OutputTaxPlan(
            selected_project_ids={"prj-001"},
            selected_transaction_ids={"rcpt"},
            manual_items=[ManualRevenueItem("m1", "Bán phế liệu", 3_000_000)],
        )

        assert planned_revenue(plan, [project], [receipt]) == 110_000_000

    def test_missing_contract_value_counts_zero(self, plan) -> None:
        project = Project("prj-001", "CT", "Không giá trị")

        assert planned_revenue(plan, [project], []) == 0


class TestEstimateTaxBalance:
    """Tests for estimate_tax_balance."""

    def test_material_target_progress(self, project, plan, make_tx) -> None:
        """Material at 60% of 100,000,000 with 40,000,000 confirmed."""
        transactions = [
            make_tx("m1", amount=25_000_000, is_material_cost=True, has_vat_invoice=True),
            make_tx("m2", amount=15_000_000, is_material_cost=True, has_vat_invoice=True),
            make_tx("m3", amount=9_000_000, is_material_cost=True),  # no invoice, unconfirmed
        ]
        targets = [CostTarget("t_material", "Vật tư", 60, MappingKey.MATERIAL)]

        result = estimate_tax_balance(plan, [project], transactions, targets=targets)
        line = result.for_key(MappingKey.MATERIAL)

        assert line.target_amount == 60_000_000
        assert line.actual_amount == 40_000_000
        assert line.missing_amount == 20_000_000
        assert line.achieved_percent == pytest.approx(66.67, abs=0.01)
        assert line.matched_transaction_ids == ("m1", "m2")

    def test_default_targets(self, project, plan) -> None:
        result = estimate_tax_balance(plan, [project], [])

        assert [b.target for b in result.breakdown] == list(DEFAULT_COST_TARGETS)
        assert result.total_target_expense == 95_000_000
        assert result.total_missing == 95_000_000

    def test_empty_targets_stay_empty(self, project, plan, make_tx) -> None:
        transactions = [make_tx(amount=500, is_material_cost=True, has_vat_invoice=True)]

        result = estimate_tax_balance(plan, [project], transactions, targets=[])

        assert result.breakdown == ()
        assert result.total_target_expense == 0
        assert result.total_missing == 0

    def test_conservation(self, project, plan, make_tx) -> None:
        """No confirmed expense is counted in two targets."""
        transactions = [
            make_tx("a", amount=1_000, is_material_cost=True, is_labor_cost=True, has_vat_invoice=True),
            make_tx("b", amount=2_000, category="Lương", has_vat_invoice=True),
            make_tx("c", amount=4_000, category="Marketing", has_vat_invoice=True),
            make_tx("d", amount=8_000, scope=TransactionScope.COMPANY_FIXED, has_vat_invoice=True),
            make_tx("e", amount=16_000, category="Khác", has_vat_invoice=True),
        ]
        targets = [
            CostTarget("t1", "Vật tư", 40, MappingKey.MATERIAL),
            CostTarget("t2", "Nhân công", 20, MappingKey.LABOR),
            CostTarget("t3", "Marketing", 5, MappingKey.MARKETING),
            CostTarget("t4", "Văn phòng", 5, MappingKey.OFFICE),
            CostTarget("t5", "Khác", 5, MappingKey.OTHER),
        ]

        result = estimate_tax_balance(plan, [project], transactions, targets=targets)

        assert result.total_valid_expense == 31_000
        assert [b.actual_amount for b in result.breakdown] == [1_000, 2_000, 4_000, 8_000, 16_000]

    def test_period_filter(self, project, plan, make_tx) -> None:
        transactions = [
            make_tx("in", amount=1_000, is_material_cost=True, has_vat_invoice=True, date=date(2024, 2, 1)),
            make_tx("out", amount=5_000, is_material_cost=True, has_vat_invoice=True, date=date(2024, 6, 1)),
        ]

        result = estimate_tax_balance(plan, [project], transactions, period=period_range(2024, quarter=1))

        assert result.for_key(MappingKey.MATERIAL).actual_amount == 1_000

    def test_override_moves_expense(self, project, make_tx) -> None:
        plan = OutputTaxPlan(
            selected_project_ids={"prj-001"},
            custom_allocations={"x": MappingKey.OFFICE},
        )
        transactions = [make_tx("x", amount=3_000, is_material_cost=True, has_vat_invoice=True)]

        result = estimate_tax_balance(plan, [project], transactions)

        assert result.for_key(MappingKey.MATERIAL).actual_amount == 0
        assert result.for_key(MappingKey.OFFICE).actual_amount == 3_000

    def test_zero_revenue(self, make_tx) -> None:
        transactions = [make_tx(amount=500, is_material_cost=True, has_vat_invoice=True)]

        result = estimate_tax_balance(OutputTaxPlan(), [], transactions)
        line = result.for_key(MappingKey.MATERIAL)

        assert result.total_planned_revenue == 0
        assert line.achieved_percent == 0.0
        assert line.missing_amount == 0.0
        assert result.for_key(MappingKey.MARKETING) is None
