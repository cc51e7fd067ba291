"""
Khata Tracker - Source Package

A small ledger for a cardboard factory: credits and debits recorded
against named persons, with balances per person and for the factory.

DESIGN PRINCIPLES:
1. Balances are always derived, never stored
2. Storage layer is swappable (local JSON or Google Sheets)
3. A failing remote store never blocks the user
4. Validation happens at the edge, before storage is touched
"""

__version__ = "1.0.0"
__author__ = "Khata Tracker Team"
