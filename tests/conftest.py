"""Pytest configuration and fixtures."""

from datetime import date, datetime
from typing import Any, Callable

import pytest

from buildledger.models.finance import (
    AccountType,
    Actor,
    CashAccount,
    Contract,
    ContractStatus,
    ContractType,
    Permission,
    Transaction,
    TransactionStatus,
    TransactionType,
)

FIXED_NOW = datetime(2024, 10, 15, 9, 30)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Deterministic time source."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Factory for transactions with sensible defaults."""

    def _make(
        transaction_id: str = "tx-001",
        transaction_type: TransactionType = TransactionType.EXPENSE,
        amount: int = 1_000_000,
        status: TransactionStatus = TransactionStatus.DRAFT,
        **kwargs: Any,
    ) -> Transaction:
        kwargs.setdefault("date", date(2024, 10, 1))
        kwargs.setdefault("project_id", "prj-001")
        kwargs.setdefault("description", "Mua xi măng")
        kwargs.setdefault("category", "Vật tư xây dựng")
        return Transaction(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            status=status,
            **kwargs,
        )

    return _make


@pytest.fixture
def account() -> CashAccount:
    """Bank account with a 1,000,000 VND opening balance."""
    return CashAccount(
        account_id="acc-001",
        bank_name="Vietcombank",
        account_name="Công ty Xây dựng An Phát",
        account_type=AccountType.BANK,
        initial_balance=1_000_000,
    )


@pytest.fixture
def revenue_contract() -> Contract:
    """Revenue contract worth 100,000,000 VND."""
    return Contract(
        contract_id="ctr-rev",
        contract_type=ContractType.REVENUE,
        value=100_000_000,
        status=ContractStatus.SIGNED,
        project_id="prj-001",
        partner_id="ptn-customer",
        name="HĐ thi công nhà phố",
    )


@pytest.fixture
def supplier_contract() -> Contract:
    """Material supply contract worth 10,000,000 VND."""
    return Contract(
        contract_id="ctr-sup",
        contract_type=ContractType.SUPPLIER_MATERIAL,
        value=10_000_000,
        status=ContractStatus.SIGNED,
        project_id="prj-001",
        partner_id="ptn-supplier",
        name="HĐ cung cấp thép",
    )


@pytest.fixture
def staff() -> Actor:
    return Actor.with_permissions("emp-staff", Permission.TRANS_CREATE, name="Nhân viên")


@pytest.fixture
def approver() -> Actor:
    return Actor.with_permissions("emp-pm", Permission.TRANS_APPROVE, name="Chỉ huy trưởng")


@pytest.fixture
def cashier() -> Actor:
    return Actor.with_permissions("emp-acc", Permission.TRANS_PAY, name="Kế toán")


@pytest.fixture
def admin() -> Actor:
    return Actor.with_permissions("emp-admin", Permission.SYS_ADMIN, name="Quản trị")


@pytest.fixture
def nobody() -> Actor:
    """Authenticated actor without any permission."""
    return Actor(actor_id="emp-guest", name="Khách")
