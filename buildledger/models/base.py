"""Base models shared across domains."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Attachment:
    """File attached to a voucher (invoice scan, transfer receipt, ...)."""

    attachment_id: str
    name: str
    kind: str = "OTHER"  # IMAGE, PDF, EXCEL, OTHER
    url: str = ""
    mime_type: str | None = None
    size: int | None = None


@dataclass
class Event:
    """Standard event envelope for streaming."""

    event_id: str
    event_type: str  # entity.action (e.g., transaction.approved)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
