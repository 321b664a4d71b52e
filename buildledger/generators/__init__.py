"""Synthetic data generators."""

from buildledger.generators.base import BaseGenerator
from buildledger.generators.pool import FakerPool

__all__ = ["BaseGenerator", "FakerPool"]
