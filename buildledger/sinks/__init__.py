"""Output sinks for audit events and demo snapshots."""

from buildledger.sinks.console import ConsoleSink
from buildledger.sinks.json_file import JsonFileSink
from buildledger.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
