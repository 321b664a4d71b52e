"""Construction finance core: transaction workflow, balances, contract
reconciliation and tax-balance estimation."""

__version__ = "0.3.0"
