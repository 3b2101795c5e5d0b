"""Household meal planner: weekly grid, ingredient ledger and undo history."""
__version__ = "0.1.0"
