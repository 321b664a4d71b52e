"""Console sink for demos and debugging."""

import json
import sys
from typing import Any, TextIO

from buildledger.models.finance import Transaction
from buildledger.sinks.serialization import to_dict

RULE = "=" * 60


def format_vnd(amount: int) -> str:
    """Format an amount as ``1.234.567 ₫``."""
    return f"{amount:,}".replace(",", ".") + " ₫"


def format_transaction(t: Transaction) -> str:
    """One ledger row: code, type, status, amount and description."""
    code = t.code or t.transaction_id[:12]
    return (
        f"{code:<14} {t.transaction_type.value:<7} {t.status.value:<9} "
        f"{format_vnd(t.amount):>18}  {t.description}"
    )


class ConsoleSink:
    """Print records to a stream, stdout by default.

    With ``pretty=False`` transactions in a batch are shown as ledger rows
    instead of JSON, which keeps a demo portfolio readable.
    """

    def __init__(
        self,
        pretty: bool = True,
        max_records: int | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.pretty = pretty
        self.max_records = max_records
        self.stream = stream
        self._counts: dict[str, int] = {}

    def write(self, topic: str, record: Any) -> None:
        """Print a single record (typically an audit event) prefixed by its topic."""
        self._print(f"[{topic}] {self._json(record)}")
        self._counts[topic] = self._counts.get(topic, 0) + 1

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print a batch under a header, truncated to ``max_records``."""
        self._print(f"\n{RULE}\nEntity: {entity_type} ({len(records)} records)\n{RULE}")

        shown = records[: self.max_records] if self.max_records else records
        for record in shown:
            if isinstance(record, Transaction) and not self.pretty:
                self._print(format_transaction(record))
            else:
                self._print(self._json(record))

        hidden = len(records) - len(shown)
        if hidden > 0:
            self._print(f"... and {hidden} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def close(self) -> None:
        """Print per-entity totals."""
        lines = [f"\n{RULE}", "Summary:"]
        lines.extend(f"  {entity_type}: {count} records" for entity_type, count in self._counts.items())
        lines.append(RULE)
        self._print("\n".join(lines))

    def _json(self, record: Any) -> str:
        return json.dumps(to_dict(record), indent=2 if self.pretty else None, ensure_ascii=False, default=str)

    def _print(self, text: str) -> None:
        print(text, file=self.stream or sys.stdout)
