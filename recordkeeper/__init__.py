"""
Record Keeper - Source Package

A small personal records app: notes, expenses and a wiki of device
commands, each stored remotely (Google Sheets) or on-device (JSON).

DESIGN PRINCIPLES:
1. The backend confirms → the in-memory store changes
2. Fail soft on load, fail visibly on write
3. No silent corrections of user input
4. Views are pure projections of the store
5. Storage layer is swappable per domain
"""

__version__ = "1.0.0"
__author__ = "Record Keeper Team"
