"""Pre-built scenarios for demo data generation."""

from buildledger.scenarios.portfolio import ProjectPortfolioScenario

__all__ = ["ProjectPortfolioScenario"]
