"""Tests for tax and cost-ratio KPIs."""

from dataclasses import replace
from datetime import date

import pytest

from buildledger.engine.tax_kpi import (
    KpiFilters,
    calculate_cost_balance,
    calculate_project_cost_kpi,
    calculate_tax_kpi,
    default_cost_plan,
)
from buildledger.models import Attachment
from buildledger.models.finance import ContractStatus, Project, TransactionStatus, TransactionType


class TestKpiFilters:
    """Tests for KpiFilters.matches."""

    def test_empty_filter_matches_all(self, make_tx) -> None:
        assert KpiFilters().matches(make_tx())

    def test_each_filter(self, make_tx) -> None:
        tx = make_tx(date=date(2024, 5, 1), partner_id="ptn-1", target_account_id="acc-001")

        assert not KpiFilters(start_date=date(2024, 6, 1)).matches(tx)
        assert not KpiFilters(end_date=date(2024, 4, 1)).matches(tx)
        assert not KpiFilters(project_id="prj-x").matches(tx)
        assert not KpiFilters(partner_id="ptn-2").matches(tx)
        assert not KpiFilters(account_id="acc-2").matches(tx)
        assert not KpiFilters(only_paid=True).matches(tx)
        assert KpiFilters(project_id="prj-001", partner_id="ptn-1").matches(tx)


class TestCalculateTaxKpi:
    """Tests for calculate_tax_kpi."""

    def test_vat_ratio_against_revenue_contracts(self, revenue_contract, make_tx) -> None:
        transactions = [
            make_tx("vat", amount=20_000_000, has_vat_invoice=True,
                    attachments=[Attachment("a1", "hd.pdf")]),
            make_tx("novat", amount=5_000_000),
            make_tx("labor", amount=1_000_000, is_labor_cost=True, category=""),
            make_tx("inc", TransactionType.INCOME, 30_000_000),
        ]

        stats = calculate_tax_kpi(transactions, [revenue_contract])

        assert stats.revenue == 30_000_000
        assert stats.total_expense == 26_000_000
        assert stats.expense_with_vat == 20_000_000
        assert stats.total_contract_value == 100_000_000
        assert stats.vat_input_ratio == pytest.approx(20.0)
        assert [t.transaction_id for t in stats.missing_vat] == ["novat", "labor"]
        assert stats.missing_vat_amount == 6_000_000
        assert [t.transaction_id for t in stats.missing_labor_contract] == ["labor"]
        assert stats.missing_files_count == 2

    def test_small_expense_without_vat_not_flagged(self, make_tx) -> None:
        stats = calculate_tax_kpi([make_tx(amount=100_000, category="Tiếp khách")], [])

        assert stats.missing_vat == []

    def test_falls_back_to_revenue(self, revenue_contract, make_tx) -> None:
        draft_contract = replace(revenue_contract, status=ContractStatus.DRAFT)
        transactions = [
            make_tx("vat", amount=1_000_000, has_vat_invoice=True),
            make_tx("inc", TransactionType.INCOME, 4_000_000),
        ]

        stats = calculate_tax_kpi(transactions, [draft_contract])

        assert stats.total_contract_value == 0
        assert stats.vat_input_ratio == pytest.approx(25.0)

    def test_no_base(self, make_tx) -> None:
        stats = calculate_tax_kpi([make_tx(has_vat_invoice=True)], [])

        assert stats.vat_input_ratio == 0.0


class TestProjectCostKpi:
    """Tests for calculate_project_cost_kpi."""

    def test_ratios_and_warnings(self, make_tx) -> None:
        project = Project("prj-001", "CT", "Biệt thự", contract_total_value=100_000_000)
        transactions = [
            make_tx("m", amount=55_000_000, status=TransactionStatus.PAID, is_material_cost=True),
            make_tx("l", amount=10_000_000, status=TransactionStatus.PAID, is_labor_cost=True),
            make_tx("pending", amount=99_000_000, status=TransactionStatus.APPROVED, is_labor_cost=True),
        ]

        kpi = calculate_project_cost_kpi(project, transactions)

        assert kpi.material_ratio == pytest.approx(55.0)
        assert kpi.labor_ratio == pytest.approx(10.0)
        assert len(kpi.warnings) == 1
        assert "vật tư" in kpi.warnings[0]

    def test_zero_value_project(self, make_tx) -> None:
        project = Project("prj-001", "CT", "Chưa ký")

        kpi = calculate_project_cost_kpi(project, [make_tx(status=TransactionStatus.PAID, is_material_cost=True)])

        assert kpi.material_ratio == 0.0
        assert kpi.warnings == []


class TestCostBalance:
    """Tests for calculate_cost_balance."""

    def test_within_plan(self, make_tx) -> None:
        transactions = [
            make_tx("inc", TransactionType.INCOME, 100_000_000, TransactionStatus.PAID),
            make_tx("m", amount=60_000_000, status=TransactionStatus.PAID, is_material_cost=True),
            make_tx("l", amount=20_000_000, status=TransactionStatus.PAID, is_labor_cost=True),
            make_tx("o", amount=5_000_000, status=TransactionStatus.PAID),
        ]

        snapshot = calculate_cost_balance(transactions, default_cost_plan(2024), period="2024")

        assert snapshot.actual_revenue == 100_000_000
        assert (snapshot.ratio_material, snapshot.ratio_labor, snapshot.ratio_overhead) == pytest.approx((60.0, 20.0, 5.0))
        assert snapshot.warnings == []
        assert snapshot.period == "2024"

    def test_loss_warning(self, make_tx) -> None:
        transactions = [
            make_tx("inc", TransactionType.INCOME, 10_000_000, TransactionStatus.PAID),
            make_tx("m", amount=20_000_000, status=TransactionStatus.PAID, is_material_cost=True),
        ]

        snapshot = calculate_cost_balance(transactions, default_cost_plan(2024))

        assert any("LỖ" in w for w in snapshot.warnings)
        assert any("VẬT TƯ" in w for w in snapshot.warnings)

    def test_default_plan(self) -> None:
        plan = default_cost_plan(2025)

        assert plan.year == 2025
        assert (plan.target_material, plan.target_labor, plan.target_overhead, plan.target_profit) == (65, 23, 10, 2)
