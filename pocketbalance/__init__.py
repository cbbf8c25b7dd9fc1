"""
PocketBalance - Source Package

A personal finance tracker: log income and spending, see your balance,
export to CSV, and let AI suggest categories or read receipts.

DESIGN PRINCIPLES:
1. AI suggests → Human confirms → Store records
2. Local data, no server
3. Failures degrade to manual entry, never to a crash
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "PocketBalance Team"
