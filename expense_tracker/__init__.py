"""
Expense Tracker - Source Package

The core of a personal/business expense tracking application.
Users record expenses, see them in filtered lists and get
weekly reports with daily and per-category breakdowns.

DESIGN PRINCIPLES:
1. Validate before anything is stored
2. Duplicate warnings are advisory, the user decides
3. Reports are derived views, never stored
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
