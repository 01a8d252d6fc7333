"""
Finance Tracker - Source Package

A personal finance ledger: record income and expenses, keep them in a
local store, and derive totals, savings, category breakdowns and
monthly summaries for display and charting.

DESIGN PRINCIPLES:
1. The ledger store is the single source of truth
2. Every view is recomputed from it, never cached
3. Every change is persisted before the call returns
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
