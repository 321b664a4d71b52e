"""Tests for construction finance models."""

from dataclasses import FrozenInstanceError

import pytest

from buildledger.models import Attachment, Event
from buildledger.models.finance import (
    Actor,
    CashAccount,
    Contract,
    ContractStatus,
    ContractType,
    CostPlan,
    OutputTaxPlan,
    Permission,
    TransactionStatus,
    TransactionType,
    has_permission,
)


class TestTransaction:
    """Tests for the Transaction model."""

    def test_defaults(self, make_tx) -> None:
        tx = make_tx()

        assert tx.status == TransactionStatus.DRAFT
        assert tx.target_account_id is None
        assert tx.attachments == []
        assert tx.has_vat_invoice is False

    def test_signed_amount(self, make_tx) -> None:
        assert make_tx(transaction_type=TransactionType.INCOME, amount=500).signed_amount == 500
        assert make_tx(transaction_type=TransactionType.EXPENSE, amount=500).signed_amount == -500

    def test_flags(self, make_tx) -> None:
        tx = make_tx(transaction_type=TransactionType.INCOME, status=TransactionStatus.PAID)

        assert tx.is_income
        assert tx.is_paid

    def test_attachments_not_shared(self, make_tx) -> None:
        first, second = make_tx("a"), make_tx("b")
        first.attachments.append(Attachment("att-1", "hoa_don.pdf", kind="PDF"))

        assert second.attachments == []


class TestCashAccount:
    """Tests for CashAccount."""

    def test_has_no_stored_balance(self, account: CashAccount) -> None:
        assert not hasattr(account, "balance")
        assert account.initial_balance == 1_000_000


class TestContract:
    """Tests for Contract direction."""

    @pytest.mark.parametrize(
        "contract_type,direction",
        [
            (ContractType.REVENUE, TransactionType.INCOME),
            (ContractType.SUPPLIER_MATERIAL, TransactionType.EXPENSE),
            (ContractType.LABOR, TransactionType.EXPENSE),
            (ContractType.SUB_CONTRACT, TransactionType.EXPENSE),
        ],
    )
    def test_direction(self, contract_type: ContractType, direction: TransactionType) -> None:
        contract = Contract("c", contract_type, 1, ContractStatus.SIGNED, "p", "x")

        assert contract.direction == direction
        assert contract.is_revenue == (contract_type == ContractType.REVENUE)


class TestCostModels:
    """Tests for cost planning models."""

    def test_cost_plan_defaults(self) -> None:
        plan = CostPlan(plan_id="p", year=2024, name="Plan")

        assert (plan.target_material, plan.target_labor) == (65.0, 23.0)
        assert (plan.target_overhead, plan.target_profit) == (10.0, 2.0)
        assert plan.targets == []

    def test_output_tax_plan_empty(self) -> None:
        plan = OutputTaxPlan()

        assert plan.selected_project_ids == set()
        assert plan.custom_allocations == {}


class TestActor:
    """Tests for Actor and has_permission."""

    def test_with_permissions_accepts_strings(self) -> None:
        actor = Actor.with_permissions("u1", "TRANS_APPROVE", Permission.TRANS_PAY)

        assert actor.permissions == frozenset({Permission.TRANS_APPROVE, Permission.TRANS_PAY})

    def test_with_permissions_rejects_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            Actor.with_permissions("u1", "TRANS_TELEPORT")

    def test_actor_is_frozen(self, approver: Actor) -> None:
        with pytest.raises(FrozenInstanceError):
            approver.actor_id = "other"  # type: ignore[misc]

    def test_has_permission(self, approver: Actor) -> None:
        assert has_permission(approver, Permission.TRANS_APPROVE)
        assert not has_permission(approver, Permission.TRANS_PAY)

    def test_admin_has_everything(self, admin: Actor) -> None:
        assert all(has_permission(admin, code) for code in Permission)

    def test_unauthenticated_has_nothing(self) -> None:
        actor = Actor("u1", permissions=frozenset({Permission.SYS_ADMIN}), is_authenticated=False)

        assert not has_permission(actor, Permission.TRANS_APPROVE)
        assert not has_permission(None, Permission.TRANS_APPROVE)


class TestEvent:
    """Tests for the Event envelope."""

    def test_metadata_default(self) -> None:
        from datetime import datetime

        event = Event("e1", "transaction.approved", datetime(2024, 1, 1), "buildledger", "tx-1", {})

        assert event.metadata == {}
        assert event.subject == "tx-1"


def test_enum_values_are_wire_strings() -> None:
    assert TransactionStatus.PAID == "PAID"
    assert TransactionType("INCOME") is TransactionType.INCOME
