"""
Shop Ledger - Source Package

A small-business income and expense ledger with a dashboard and a
yearly report, persisted as a single local snapshot.

DESIGN PRINCIPLES:
1. One store object owns the data; views get it by reference
2. Aggregates are recomputed from the full sequence, never cached
3. The snapshot layout is a compatibility contract
4. Bad stored data degrades to an empty ledger, never a crash
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Shop Ledger Team"
