"""Planner state engine.

Subpackages:
- grid: week plan addressing and navigation
- consumption: commands coupling the week grid with the ingredient ledger
- inventory: ledger and catalog commands, inventory views
- importing: receipt reconciliation, whole-state import/export, legacy shapes
- history: snapshot-based undo/redo
- reporting: nutrition totals and the exportable week grid

Every command is a plain function ``(state, ...) -> state`` that never mutates its
input; returning the input object unchanged means the command was a no-op.
"""
__all__ = ["grid", "consumption", "inventory", "importing", "history", "reporting"]
