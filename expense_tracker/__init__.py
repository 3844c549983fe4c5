"""
Expense Tracker - Source Package

A personal expense tracker: records spending events in memory,
persists them to a CSV ledger, and summarises them by day, month,
year or date range.

DESIGN PRINCIPLES:
1. Store order is insertion order
2. Records are immutable once added
3. Bad ledger rows are skipped and reported, never silently kept
4. Every ledger change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
