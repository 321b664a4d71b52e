"""Domain models for construction finance."""

from buildledger.models.base import Attachment, Event

__all__ = ["Attachment", "Event"]
