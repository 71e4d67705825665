"""
RupeeWise - Personal Finance Tracker

Records income/expense transactions, peer-to-peer debts and
per-category budget limits, and derives summaries from them.

DESIGN PRINCIPLES:
1. The record store is the single owner of entity identity
2. Aggregations are pure functions of a store snapshot
3. Persistence observes the store, the store knows nothing of storage
4. Invalid input is rejected loudly, not silently corrected
5. AI advice is best-effort and never blocks the core
"""

__version__ = "1.0.0"
__author__ = "RupeeWise Team"
