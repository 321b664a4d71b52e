"""Field validation and voucher numbering for transactions."""

import random
from datetime import datetime

from buildledger.exceptions import ValidationError
from buildledger.models.finance import (
    Transaction,
    TransactionScope,
    TransactionType,
)

CODE_PREFIXES = {
    TransactionType.INCOME: "PT",  # phiếu thu
    TransactionType.EXPENSE: "PC",  # phiếu chi
}


def validate_transaction(transaction: Transaction, require_account: bool = False) -> None:
    """Check the fields a voucher needs before it enters the workflow.

    Parameters
    ----------
    transaction : Transaction
        Voucher to check.
    require_account : bool
        Also require ``target_account_id``. The create path sets this; a
        submitted expense may still get its account at payment time.

    Raises
    ------
    ValidationError
        On the first rule that fails.
    """
    if transaction.amount is None or transaction.amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    if not (transaction.description or "").strip():
        raise ValidationError("Description is required")
    if transaction.scope == TransactionScope.PROJECT and not transaction.project_id:
        raise ValidationError("Project-scoped transaction requires a project")
    if require_account and not transaction.target_account_id:
        raise ValidationError("Target cash account is required")

    if transaction.transaction_type == TransactionType.EXPENSE and transaction.scope == TransactionScope.PROJECT:
        has_cost_group = (
            transaction.is_material_cost
            or transaction.is_labor_cost
            or bool((transaction.category or "").strip())
        )
        if not has_cost_group:
            raise ValidationError("Project expense requires a cost group (material, labor or category)")


def generate_code(
    transaction_type: TransactionType,
    when: datetime | None = None,
    sequence: int | None = None,
) -> str:
    """Build a voucher number such as ``PC-2410-0042``.

    When ``sequence`` is omitted a random 4-digit suffix is used; the
    backend owns the authoritative sequence.
    """
    when = when or datetime.now()
    if sequence is None:
        sequence = random.randint(1000, 9999)
    prefix = CODE_PREFIXES[TransactionType(transaction_type)]
    return f"{prefix}-{when:%y%m}-{sequence:04d}"
