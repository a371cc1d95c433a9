"""
Client Banking

Account lifecycle and status-gated transactions for client bank accounts,
with an optional credit score policy and Decimal balances throughout.
"""

__version__ = "1.0.0"
