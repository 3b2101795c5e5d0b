"""Slot commands coupling the week grid with the ingredient ledger."""
from planner.logic.consumption.engine import (
    drop_ingredient, drop_meal, move_or_swap, clear_slot, remove_to_inventory,
    duplicate_slot, make_leftovers, set_servings, save_slot_as_meal,
    ref_deltas, apply_ref_deltas, restore_refs,
)

__all__ = [
    "drop_ingredient", "drop_meal", "move_or_swap", "clear_slot", "remove_to_inventory",
    "duplicate_slot", "make_leftovers", "set_servings", "save_slot_as_meal",
    "ref_deltas", "apply_ref_deltas", "restore_refs",
]
