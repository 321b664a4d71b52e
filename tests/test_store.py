"""Tests for LedgerStore."""

import logging
from dataclasses import replace

import pytest

from buildledger.exceptions import EntityNotFoundError, InvalidStateError, ReferentialIntegrityError
from buildledger.models.finance import (
    Partner,
    PartnerType,
    Project,
    TransactionStatus,
    TransactionType,
)
from buildledger.store import LedgerStore


@pytest.fixture
def store(account, revenue_contract, supplier_contract) -> LedgerStore:
    """Store with one project, two partners, one account and two contracts."""
    store = LedgerStore()
    store.add_project(Project("prj-001", "CT24-001", "Nhà phố Quận 7", contract_total_value=100_000_000))
    store.add_partner(Partner("ptn-customer", "KH0001", "Nguyễn Văn An", PartnerType.CUSTOMER))
    store.add_partner(Partner("ptn-supplier", "NCC0001", "Thép Hòa Phát", PartnerType.SUPPLIER))
    store.add_account(account)
    store.add_contract(revenue_contract)
    store.add_contract(supplier_contract)
    return store


class TestReferentialIntegrity:
    """Dangling references in strict and lenient mode."""

    def test_contract_requires_project(self, supplier_contract) -> None:
        with pytest.raises(ReferentialIntegrityError, match="Project"):
            LedgerStore().add_contract(supplier_contract)

    def test_transaction_requires_account(self, store, make_tx) -> None:
        with pytest.raises(ReferentialIntegrityError, match="Cash account"):
            store.add_transaction(make_tx(target_account_id="acc-missing"))

    def test_transaction_requires_contract(self, store, make_tx) -> None:
        with pytest.raises(ReferentialIntegrityError, match="Contract"):
            store.add_transaction(make_tx(contract_id="ctr-missing"))

    def test_lenient_mode_logs(self, make_tx, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="buildledger.store.ledger")
        store = LedgerStore(strict=False)

        store.add_transaction(make_tx(project_id="prj-missing"))

        assert "prj-missing" in caplog.text
        assert store.get_transaction("tx-001").project_id == "prj-missing"


class TestUpdateTransaction:
    """Tests for workflow checks on update_transaction."""

    def test_returns_previous(self, store, make_tx) -> None:
        draft = make_tx()
        store.add_transaction(draft)

        previous = store.update_transaction(replace(draft, status=TransactionStatus.SUBMITTED))

        assert previous is draft
        assert store.get_transaction("tx-001").status == TransactionStatus.SUBMITTED

    def test_rejects_illegal_transition(self, store, make_tx) -> None:
        store.add_transaction(make_tx(status=TransactionStatus.SUBMITTED))

        with pytest.raises(InvalidStateError):
            store.update_transaction(make_tx(status=TransactionStatus.PAID, target_account_id="acc-001"))

    def test_paid_requires_account(self, store, make_tx) -> None:
        store.add_transaction(make_tx(status=TransactionStatus.APPROVED))

        with pytest.raises(InvalidStateError, match="target account"):
            store.update_transaction(make_tx(status=TransactionStatus.PAID))

    def test_paid_fields_locked(self, store, make_tx) -> None:
        paid = make_tx(status=TransactionStatus.PAID, target_account_id="acc-001")
        store.add_transaction(paid)

        with pytest.raises(InvalidStateError, match="locked"):
            store.update_transaction(replace(paid, amount=1))
        store.update_transaction(replace(paid, description="Bổ sung hóa đơn", has_vat_invoice=True))

        assert store.get_transaction("tx-001").has_vat_invoice is True

    def test_rejected_fields_locked(self, store, make_tx) -> None:
        rejected = make_tx(status=TransactionStatus.REJECTED, rejection_reason="Thiếu hóa đơn")
        store.add_transaction(rejected)

        with pytest.raises(InvalidStateError, match="REJECTED; amount"):
            store.update_transaction(replace(rejected, amount=5_000_000))
        store.update_transaction(replace(rejected, description="Đã bổ sung chứng từ"))

        assert store.get_transaction("tx-001").amount == 1_000_000

    def test_check_update_leaves_store_unchanged(self, store, make_tx) -> None:
        approved = make_tx(status=TransactionStatus.APPROVED)
        store.add_transaction(approved)

        previous = store.check_update(make_tx(status=TransactionStatus.PAID, target_account_id="acc-001"))

        assert previous is approved
        assert store.get_transaction("tx-001") is approved
        assert store.get_account_transactions("acc-001") == []
        with pytest.raises(ReferentialIntegrityError):
            store.check_update(make_tx(status=TransactionStatus.PAID, target_account_id="acc-unknown"))

    def test_reindexes_account(self, store, make_tx) -> None:
        store.add_transaction(make_tx(status=TransactionStatus.APPROVED))

        store.update_transaction(make_tx(status=TransactionStatus.PAID, target_account_id="acc-001"))

        assert [t.transaction_id for t in store.get_account_transactions("acc-001")] == ["tx-001"]

    def test_restore_skips_checks(self, store, make_tx) -> None:
        approved = make_tx(status=TransactionStatus.APPROVED)
        store.add_transaction(approved)
        store.update_transaction(make_tx(status=TransactionStatus.PAID, target_account_id="acc-001"))

        store.restore_transaction(approved)

        assert store.get_transaction("tx-001").status == TransactionStatus.APPROVED
        assert store.get_account_transactions("acc-001") == []

    def test_unknown_transaction(self, store, make_tx) -> None:
        with pytest.raises(EntityNotFoundError):
            store.update_transaction(make_tx("tx-missing"))


class TestQueries:
    """Tests for derived queries."""

    def test_balance_is_recomputed(self, store, make_tx) -> None:
        store.add_transaction(make_tx("t1", TransactionType.INCOME, 500_000, TransactionStatus.PAID, target_account_id="acc-001"))
        assert store.balance("acc-001") == 1_500_000

        store.remove_transaction("t1")

        assert store.balance("acc-001") == 1_000_000
        assert store.balances() == {"acc-001": 1_000_000}

    def test_readding_same_id_counts_once(self, store, make_tx) -> None:
        income = make_tx(
            "t1", TransactionType.INCOME, 500_000, TransactionStatus.PAID,
            target_account_id="acc-001", contract_id="ctr-rev",
        )

        store.add_transaction(income)
        store.add_transaction(income)

        assert store.balance("acc-001") == 1_500_000
        assert store.balances()["acc-001"] == 1_500_000
        assert store.reconcile("ctr-rev").total_paid == 500_000
        assert len(store.get_project_transactions("prj-001")) == 1

    def test_readding_moves_index(self, store, make_tx) -> None:
        store.add_transaction(make_tx("t1", contract_id="ctr-sup"))

        store.add_transaction(make_tx("t1"))

        assert store.get_contract_transactions("ctr-sup") == []

    def test_reconcile(self, store, make_tx) -> None:
        store.add_transaction(make_tx("t1", TransactionType.INCOME, 30_000_000, TransactionStatus.PAID, contract_id="ctr-rev"))

        assert store.reconcile("ctr-rev").paid_percent == 30

    def test_unknown_lookups(self, store) -> None:
        with pytest.raises(EntityNotFoundError):
            store.balance("acc-missing")
        with pytest.raises(EntityNotFoundError):
            store.reconcile("ctr-missing")
        with pytest.raises(EntityNotFoundError):
            store.get_transaction("tx-missing")

    def test_project_queries(self, store, make_tx) -> None:
        store.add_transaction(make_tx("t1"))
        store.add_transaction(make_tx("t2", status=TransactionStatus.SUBMITTED))

        assert len(store.get_project_transactions("prj-001")) == 2
        assert {c.contract_id for c in store.get_project_contracts("prj-001")} == {"ctr-rev", "ctr-sup"}
        assert [t.transaction_id for t in store.pending()] == ["t2"]

    def test_update_project(self, store) -> None:
        project = replace(store.projects["prj-001"], contract_total_value=120_000_000)

        store.update_project(project)

        assert store.projects["prj-001"].contract_total_value == 120_000_000
        with pytest.raises(EntityNotFoundError):
            store.update_project(Project("prj-x", "X", "X"))

    def test_summary(self, store) -> None:
        assert store.summary() == {
            "projects": 1,
            "partners": 2,
            "accounts": 1,
            "contracts": 2,
            "transactions": 0,
        }
