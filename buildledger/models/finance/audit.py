"""Audit trail entry model."""

from dataclasses import dataclass
from datetime import datetime

from buildledger.models.finance.enums import AuditAction


@dataclass
class AuditEntry:
    """Record of one action performed on an entity."""

    entry_id: str
    action: AuditAction
    entity: str  # TRANSACTION, PROJECT, SYSTEM
    entity_id: str
    actor_id: str
    actor_name: str
    timestamp: datetime
    metadata: str | None = None
    hash: str | None = None
