#!/usr/bin/env python3
"""Generate a demo ledger snapshot.

This script builds a construction company portfolio (cash accounts,
partners, projects, contracts and vouchers driven through the approval
workflow) and writes it as JSON files, one per entity type. The audit
trail of every workflow step goes to a JSON Lines file or to Kafka.

The output can be loaded by the REST backend or inspected by hand.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from buildledger.audit import AuditTrail
from buildledger.config import BuildLedgerConfig
from buildledger.logging import setup_logging
from buildledger.scenarios import ProjectPortfolioScenario
from buildledger.sinks import ConsoleSink, JsonFileSink, KafkaSink
from buildledger.sinks.console import format_vnd

logger = logging.getLogger("generate_demo_data")


def print_summary(scenario: ProjectPortfolioScenario) -> None:
    """Log counts, account balances and contract positions."""
    store = scenario.store
    logger.info("=" * 60)
    for entity, count in store.summary().items():
        logger.info("  %-14s %d", entity, count)

    logger.info("Account balances:")
    for account_id, balance in store.balances().items():
        account = store.accounts[account_id]
        logger.info("  %-30s %s", account.account_name[:30], format_vnd(balance))

    over_budget = [
        status for status in (store.reconcile(c) for c in store.contracts) if status.is_over_budget
    ]
    logger.info("Contracts over budget: %d", len(over_budget))
    if scenario.audit is not None:
        logger.info("Audit entries: %d", len(scenario.audit))
    logger.info("=" * 60)


def main() -> None:
    """Main entry point."""
    config = BuildLedgerConfig.from_env()

    parser = argparse.ArgumentParser(description="Generate a demo construction ledger")
    parser.add_argument(
        "--projects",
        type=int,
        default=config.demo.num_projects,
        help="Number of projects (default: %(default)s)",
    )
    parser.add_argument(
        "--transactions",
        type=int,
        default=config.demo.transactions_per_project,
        help="Average vouchers per project (default: %(default)s)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed for reproducibility (default: %(default)s)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.output.json_output_dir,
        help="Directory for JSON files (default: %(default)s)",
    )
    parser.add_argument(
        "--audit",
        choices=["none", "file", "kafka", "console"],
        default="file",
        help="Where audit events go (default: %(default)s)",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=config.kafka.bootstrap_servers,
        help="Kafka bootstrap servers for --audit kafka",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=config.output.pretty_json,
        help="Pretty-print JSON output",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
    )

    args = parser.parse_args()
    setup_logging(config.log_level, args.log_format)

    json_sink = JsonFileSink(args.output_dir, pretty=args.pretty)
    audit_sink = None
    if args.audit == "file":
        audit_sink = json_sink
    elif args.audit == "console":
        audit_sink = ConsoleSink(pretty=False)
    elif args.audit == "kafka":
        config.kafka.bootstrap_servers = args.kafka_bootstrap
        audit_sink = KafkaSink(config.kafka)

    audit = AuditTrail(sink=audit_sink, topic=config.kafka.audit_topic) if args.audit != "none" else None

    logger.info("Projects: %d, vouchers/project: ~%d, seed: %d", args.projects, args.transactions, args.seed)
    scenario = ProjectPortfolioScenario(
        num_projects=args.projects,
        transactions_per_project=args.transactions,
        paid_rate=config.demo.paid_rate,
        rejected_rate=config.demo.rejected_rate,
        seed=args.seed,
        audit=audit,
        locale=config.demo.locale,
    )
    scenario.generate()
    scenario.export([json_sink])

    if isinstance(audit_sink, KafkaSink):
        audit_sink.close()
    json_sink.close()
    print_summary(scenario)


if __name__ == "__main__":
    main()
