"""Conversion between backend JSON payloads and model dataclasses.

The backend speaks camelCase with an ``id`` key per entity and ISO date
strings; the models use snake_case, enums and ``date``/``datetime``.
"""

import re
from datetime import date, datetime
from typing import Any

from buildledger.models import Attachment
from buildledger.models.finance import (
    AccountOwner,
    AccountStatus,
    AccountType,
    CashAccount,
    Contract,
    ContractStatus,
    ContractType,
    CostCenterType,
    CostPlan,
    CostTarget,
    MappingKey,
    Partner,
    PartnerType,
    Project,
    ProjectStatus,
    Transaction,
    TransactionScope,
    TransactionStatus,
    TransactionType,
)
from buildledger.sinks.serialization import serialize_value

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Names that do not follow the plain snake <-> camel rule
TRANSACTION_RENAMES = {
    "transaction_id": "id",
    "transaction_type": "type",
    "has_vat_invoice": "hasVATInvoice",
}
ACCOUNT_RENAMES = {"account_id": "id", "account_type": "type"}
CONTRACT_RENAMES = {"contract_id": "id", "contract_type": "type"}
PROJECT_RENAMES = {"project_id": "id", "manager_id": "managerEmpId"}
PARTNER_RENAMES = {"partner_id": "id", "partner_type": "type"}


def snake_to_camel(name: str) -> str:
    """``target_account_id`` -> ``targetAccountId``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def camel_to_snake(name: str) -> str:
    """``targetAccountId`` -> ``target_account_id``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def parse_date(value: Any) -> date | None:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _amount(value: Any) -> int:
    if value in (None, ""):
        return 0
    return int(round(float(value)))


def _optional_amount(value: Any) -> int | None:
    return None if value in (None, "") else _amount(value)


def _enum(enum_cls: Any, value: Any, default: Any = None) -> Any:
    if value in (None, ""):
        return default
    return enum_cls(value)


def _dump(obj: Any, renames: dict[str, str]) -> dict[str, Any]:
    """Serialize a flat dataclass to camelCase, dropping ``None`` values."""
    result: dict[str, Any] = {}
    for name, value in vars(obj).items():
        if value is None:
            continue
        key = renames.get(name) or snake_to_camel(name)
        result[key] = serialize_value(value)
    return result


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def attachment_from_dict(data: dict[str, Any]) -> Attachment:
    return Attachment(
        attachment_id=str(data.get("id", "")),
        name=data.get("name", ""),
        kind=data.get("type", "OTHER"),
        url=data.get("url", ""),
        mime_type=data.get("mimeType"),
        size=data.get("size"),
    )


def attachment_to_dict(attachment: Attachment) -> dict[str, Any]:
    return _dump(attachment, {"attachment_id": "id", "kind": "type"})


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    """Build a ``Transaction`` from a backend payload."""
    return Transaction(
        transaction_id=str(data["id"]),
        date=parse_date(data.get("date")),
        transaction_type=TransactionType(data["type"]),
        amount=_amount(data.get("amount")),
        status=_enum(TransactionStatus, data.get("status"), TransactionStatus.DRAFT),
        scope=_enum(TransactionScope, data.get("scope"), TransactionScope.PROJECT),
        category=data.get("category") or "",
        description=data.get("description") or "",
        code=data.get("code"),
        target_account_id=data.get("targetAccountId") or None,
        project_id=data.get("projectId") or None,
        partner_id=data.get("partnerId") or None,
        employee_id=data.get("employeeId") or None,
        contract_id=data.get("contractId") or None,
        cost_center_id=data.get("costCenterId") or None,
        cost_center_type=_enum(CostCenterType, data.get("costCenterType")),
        has_vat_invoice=bool(data.get("hasVATInvoice", False)),
        vat_amount=_optional_amount(data.get("vatAmount")),
        is_material_cost=bool(data.get("isMaterialCost", False)),
        is_labor_cost=bool(data.get("isLaborCost", False)),
        is_payroll=bool(data.get("isPayroll", False)),
        attachments=[attachment_from_dict(a) for a in data.get("attachments") or []],
        requester_id=data.get("requesterId"),
        performed_by=data.get("performedBy"),
        approved_by=data.get("approvedBy"),
        confirmed_by=data.get("confirmedBy"),
        confirmed_at=parse_datetime(data.get("confirmedAt")),
        rejection_reason=data.get("rejectionReason"),
        created_at=parse_datetime(data.get("createdAt")),
        updated_at=parse_datetime(data.get("updatedAt")),
    )


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    """Serialize a ``Transaction`` to the backend's camelCase shape."""
    data = _dump(transaction, TRANSACTION_RENAMES)
    data["attachments"] = [attachment_to_dict(a) for a in transaction.attachments]
    return data


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


def account_from_dict(data: dict[str, Any]) -> CashAccount:
    return CashAccount(
        account_id=str(data["id"]),
        bank_name=data.get("bankName", ""),
        account_name=data.get("accountName", ""),
        account_type=_enum(AccountType, data.get("type"), AccountType.BANK),
        initial_balance=_amount(data.get("initialBalance")),
        status=_enum(AccountStatus, data.get("status"), AccountStatus.ACTIVE),
        owner=_enum(AccountOwner, data.get("owner"), AccountOwner.COMPANY),
        account_number=data.get("accountNumber"),
    )


def account_to_dict(account: CashAccount) -> dict[str, Any]:
    return _dump(account, ACCOUNT_RENAMES)


def contract_from_dict(data: dict[str, Any]) -> Contract:
    return Contract(
        contract_id=str(data["id"]),
        contract_type=ContractType(data["type"]),
        value=_amount(data.get("value")),
        status=_enum(ContractStatus, data.get("status"), ContractStatus.DRAFT),
        project_id=data.get("projectId", ""),
        partner_id=data.get("partnerId", ""),
        code=data.get("code", ""),
        name=data.get("name", ""),
        signed_date=parse_date(data.get("signedDate")),
    )


def contract_to_dict(contract: Contract) -> dict[str, Any]:
    return _dump(contract, CONTRACT_RENAMES)


def project_from_dict(data: dict[str, Any]) -> Project:
    return Project(
        project_id=str(data["id"]),
        code=data.get("code", ""),
        name=data.get("name", ""),
        status=_enum(ProjectStatus, data.get("status"), ProjectStatus.ACTIVE),
        customer_name=data.get("customerName", ""),
        contract_total_value=_optional_amount(data.get("contractTotalValue")),
        manager_id=data.get("managerEmpId"),
        address=data.get("address"),
        start_date=parse_date(data.get("startDate")),
        end_date=parse_date(data.get("endDate")),
    )


def project_to_dict(project: Project) -> dict[str, Any]:
    return _dump(project, PROJECT_RENAMES)


def partner_from_dict(data: dict[str, Any]) -> Partner:
    return Partner(
        partner_id=str(data["id"]),
        code=data.get("code", ""),
        name=data.get("name", ""),
        partner_type=_enum(PartnerType, data.get("type"), PartnerType.SUPPLIER),
        tax_code=data.get("taxCode"),
        phone=data.get("phone"),
        status=data.get("status", "ACTIVE"),
    )


def partner_to_dict(partner: Partner) -> dict[str, Any]:
    return _dump(partner, PARTNER_RENAMES)


# ---------------------------------------------------------------------------
# Cost plan
# ---------------------------------------------------------------------------


def cost_plan_from_dict(data: dict[str, Any]) -> CostPlan:
    targets = [
        CostTarget(
            target_id=str(t["id"]),
            label=t.get("label", ""),
            percent=float(t.get("percent", 0)),
            mapping_key=MappingKey(t.get("mappingKey", "OTHER")),
            description=t.get("description") or "",
        )
        for t in data.get("targets") or []
    ]
    return CostPlan(
        plan_id=str(data["id"]),
        year=int(data.get("year", date.today().year)),
        name=data.get("name", ""),
        target_material=float(data.get("targetMaterial", 65)),
        target_labor=float(data.get("targetLabor", 23)),
        target_overhead=float(data.get("targetOverhead", 10)),
        target_profit=float(data.get("targetProfit", 2)),
        targets=targets,
    )


def cost_plan_to_dict(plan: CostPlan) -> dict[str, Any]:
    data = _dump(plan, {"plan_id": "id"})
    data["targets"] = [_dump(t, {"target_id": "id"}) for t in plan.targets]
    return data
