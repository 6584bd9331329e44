"""
Finance Tracker - Source Package

A personal finance tracker: named accounts with an icon, a color and a
balance, their transactions, and the whole collection kept in a remote
document store.

DESIGN PRINCIPLES:
1. The in-memory collection is the single source of truth
2. Every mutation is an explicit command that saves the whole collection
3. Deleting an account needs an explicit confirmation
4. Persistence failures are reported as results, never raised to the UI
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
