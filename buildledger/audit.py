"""Audit trail for workflow actions.

Each recorded action becomes an ``AuditEntry`` whose ``hash`` is the
sha256 of its canonical content, wrapped in an ``Event`` envelope and
forwarded to an optional sink.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Protocol

from buildledger.models import Event
from buildledger.models.finance import Actor, AuditAction, AuditEntry

logger = logging.getLogger(__name__)

EVENT_SOURCE = "buildledger"
DEFAULT_TOPIC = "buildledger.audit"


class EventSink(Protocol):
    """Anything with a ``write(topic, record)`` method."""

    def write(self, topic: str, record: Any) -> None: ...


def compute_hash(entry: AuditEntry) -> str:
    """Return the sha256 hex digest of an entry's content (excluding the hash)."""
    payload = json.dumps(
        {
            "id": entry.entry_id,
            "action": entry.action.value,
            "entity": entry.entity,
            "entityId": entry.entity_id,
            "actorId": entry.actor_id,
            "timestamp": entry.timestamp.isoformat(),
            "metadata": entry.metadata,
        },
        sort_keys=True,
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def verify(entry: AuditEntry) -> bool:
    """True if ``entry.hash`` still matches its content."""
    return entry.hash is not None and entry.hash == compute_hash(entry)


class AuditTrail:
    """Collect audit entries and forward them as events.

    Parameters
    ----------
    sink : EventSink | None
        Destination for ``Event`` envelopes. Sink errors propagate.
    topic : str
        Topic passed to the sink.
    clock : Callable[[], datetime] | None
        Time source for entry timestamps.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        topic: str = DEFAULT_TOPIC,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.sink = sink
        self.topic = topic
        self._clock = clock or datetime.now
        self._entries: list[AuditEntry] = []

    def record(
        self,
        action: AuditAction,
        entity: str,
        entity_id: str,
        actor: Actor,
        metadata: str | None = None,
    ) -> AuditEntry:
        """Create, store and publish one entry."""
        entry = AuditEntry(
            entry_id=str(uuid.uuid4()),
            action=action,
            entity=entity,
            entity_id=entity_id,
            actor_id=actor.actor_id,
            actor_name=actor.name or actor.actor_id,
            timestamp=self._clock(),
            metadata=metadata,
        )
        entry.hash = compute_hash(entry)
        self._entries.append(entry)

        if self.sink is not None:
            self.sink.write(self.topic, self.to_event(entry))
        logger.debug("Audit %s %s %s", entry.action.value, entity, entity_id)
        return entry

    def to_event(self, entry: AuditEntry) -> Event:
        """Wrap an entry in the streaming envelope."""
        return Event(
            event_id=entry.entry_id,
            event_type=f"{entry.entity.lower()}.{_past_tense(entry.action)}",
            event_time=entry.timestamp,
            source=EVENT_SOURCE,
            subject=entry.entity_id,
            data={
                "action": entry.action.value,
                "entity": entry.entity,
                "entity_id": entry.entity_id,
                "actor_id": entry.actor_id,
                "actor_name": entry.actor_name,
                "metadata": entry.metadata,
            },
            metadata={"hash": entry.hash},
        )

    def entries(self, entity_id: str | None = None) -> list[AuditEntry]:
        """Recorded entries, oldest first, optionally for one entity."""
        if entity_id is None:
            return list(self._entries)
        return [e for e in self._entries if e.entity_id == entity_id]

    def __len__(self) -> int:
        return len(self._entries)


_PAST_TENSE = {
    AuditAction.CREATE: "created",
    AuditAction.SUBMIT: "submitted",
    AuditAction.APPROVE: "approved",
    AuditAction.REJECT: "rejected",
    AuditAction.PAY: "paid",
    AuditAction.CONFIRM_INCOME: "income_confirmed",
    AuditAction.UPDATE: "updated",
    AuditAction.DELETE: "deleted",
}


def _past_tense(action: AuditAction) -> str:
    return _PAST_TENSE.get(action, action.value.lower())
