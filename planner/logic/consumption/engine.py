"""Consumption engine: slot commands that keep the week grid and the ledger consistent.

Every command takes a ``PlannerState`` and returns a new one; grid and ledger are
updated together on the same clone. Invalid input (unknown ids, bad addresses, empty
sources, out-of-range days) returns the input state unchanged.

Quantities inside slots are serving units; the ledger converts them to stock counts
with ``qty / servings_per_count``.
"""
from __future__ import annotations
import logging
import math
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from planner.domain.Ingredient import Ingredient
from planner.domain.Ledger import Ledger
from planner.domain.Meal import Meal, MealIngredient
from planner.domain.PlannerState import PlannerState
from planner.domain.WeekPlan import IngredientRef, SlotAddress, SlotEntry, WeekPlan, add_ingredient_ref
from planner.logic.grid.addressing import ensure_plan, get_slot, set_slot
from planner.utilities.constants import DEFAULT_SERVINGS, LEFTOVERS_MEAL_TYPE, MIN_QTY, DAYS_PER_WEEK

logger = logging.getLogger(__name__)

__all__ = [
    "drop_ingredient", "drop_meal", "move_or_swap", "clear_slot", "remove_to_inventory",
    "duplicate_slot", "make_leftovers", "set_servings", "save_slot_as_meal",
    "ref_deltas", "apply_ref_deltas", "restore_refs",
]


# -------------------- Helpers --------------------
def _addresses_valid(state: PlannerState, *addresses: SlotAddress) -> bool:
    profile_ids = state.profile_ids()
    return all(isinstance(a, SlotAddress) and a.is_valid(profile_ids) for a in addresses)


def _read(state: PlannerState, address: SlotAddress) -> Optional[SlotEntry]:
    return get_slot(state.current_plan(), address)


def _begin(state: PlannerState) -> Tuple[PlannerState, WeekPlan]:
    new_state = state.clone()
    return new_state, ensure_plan(new_state.week_plans, new_state.current_week_start_date)


def _store(state: PlannerState, plan: WeekPlan) -> PlannerState:
    state.week_plans[state.current_week_start_date] = plan
    return state


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def restore_refs(ledger: Ledger, refs: List[IngredientRef]):
    """Give every resolvable ref's quantity back to stock (inverse of consumption)."""
    for ref in refs:
        ingredient = ledger.resolve(ref.ingredient_id, ref.name)
        if ingredient is not None:
            ledger.restore(ingredient, ref.qty)


def ref_deltas(old_refs: List[IngredientRef], new_refs: List[IngredientRef]) -> Dict[str, Tuple[IngredientRef, float]]:
    """Net serving-unit change per ingredient key between two ref lists.

    A key present only in ``old_refs`` yields its full negative quantity, so a ref
    dropped from the list is restored entirely.
    """
    totals: Dict[str, List] = OrderedDict()
    for sign, refs in ((-1, old_refs), (1, new_refs)):
        for ref in refs:
            entry = totals.setdefault(ref.key, [ref, 0.0])
            entry[1] += sign * ref.qty
    return {key: (ref, delta) for key, (ref, delta) in totals.items()}


def apply_ref_deltas(ledger: Ledger, old_refs: List[IngredientRef], new_refs: List[IngredientRef]):
    for ref, delta in ref_deltas(old_refs, new_refs).values():
        if abs(delta) < 1e-9:
            continue
        ingredient = ledger.resolve(ref.ingredient_id, ref.name)
        if ingredient is not None:
            ledger.consume(ingredient, delta)


def _merge_dropped(refs: List[IngredientRef], ingredient: Ingredient) -> List[IngredientRef]:
    """Merge one serving of ``ingredient`` by id first, then by an unbound ref of the same name."""
    for ref in refs:
        if ref.ingredient_id == ingredient.id:
            return add_ingredient_ref(refs, IngredientRef(ingredient.name, 1, ingredient.id))
    merged = [ref.copy() for ref in refs]
    for ref in merged:
        if not ref.ingredient_id and IngredientRef(ref.name).key == IngredientRef(ingredient.name).key:
            ref.ingredient_id = ingredient.id
            ref.qty += 1
            return merged
    merged.append(IngredientRef(ingredient.name, 1, ingredient.id))
    return merged


# -------------------- Commands --------------------
def drop_ingredient(state: PlannerState, address: SlotAddress, ingredient_id: str) -> PlannerState:
    """Add one serving of an inventory ingredient to a slot and consume its stock."""
    if not _addresses_valid(state, address) or state.ledger.find(ingredient_id) is None:
        return state
    new_state, plan = _begin(state)
    ingredient = new_state.ledger.find(ingredient_id)
    current = get_slot(plan, address)
    if current is None:
        current = SlotEntry(servings=max(1, _round_half_up(ingredient.servings_per_count)))
    else:
        current = current.copy()
    current.ingredient_refs = _merge_dropped(current.ingredient_refs, ingredient)
    new_state.ledger.consume(ingredient, 1)
    logger.debug(f"Dropped '{ingredient.name}' into {address}; stock now {ingredient.count}")
    return _store(new_state, set_slot(plan, address, current))


def drop_meal(state: PlannerState, address: SlotAddress, meal_id: str) -> PlannerState:
    """Place a copy of a meal template into a slot, replacing (and refunding) what was there."""
    meal = state.find_meal(meal_id)
    if meal is None or not _addresses_valid(state, address):
        return state
    new_state, plan = _begin(state)
    ledger = new_state.ledger
    existing = get_slot(plan, address)
    if existing is not None:
        restore_refs(ledger, existing.ingredient_refs)

    servings = existing.servings if existing and existing.servings else meal.servings_default
    servings = max(1, int(servings or DEFAULT_SERVINGS))
    scale = servings / max(1, meal.servings_default)

    refs: List[IngredientRef] = []
    for line in meal.ingredients:
        qty = max(MIN_QTY, (line.qty or 1) * scale)
        matched = ledger.find_by_name(line.name)
        refs = add_ingredient_ref(refs, IngredientRef(line.name, qty, matched.id if matched else None))
        if matched is not None:
            ledger.consume(matched, qty)

    slot = SlotEntry(refs, servings, meal_id=meal.id, notes=existing.notes if existing else None)
    logger.debug(f"Dropped meal '{meal.name}' into {address} x{servings}")
    return _store(new_state, set_slot(plan, address, slot))


def move_or_swap(state: PlannerState, source: SlotAddress, target: SlotAddress) -> PlannerState:
    """Swap the contents of two slots; the ledger is untouched."""
    if source == target or not _addresses_valid(state, source, target):
        return state
    source_slot = _read(state, source)
    if source_slot is None:
        return state
    target_slot = _read(state, target)
    new_state, plan = _begin(state)
    plan = set_slot(plan, target, source_slot)
    plan = set_slot(plan, source, target_slot)
    return _store(new_state, plan)


def clear_slot(state: PlannerState, address: SlotAddress) -> PlannerState:
    """Discard a slot without refunding its ingredients."""
    if not _addresses_valid(state, address) or _read(state, address) is None:
        return state
    new_state, plan = _begin(state)
    return _store(new_state, set_slot(plan, address, None))


def remove_to_inventory(state: PlannerState, address: SlotAddress) -> PlannerState:
    """Empty a slot and return every referenced quantity to stock."""
    if not _addresses_valid(state, address):
        return state
    slot = _read(state, address)
    if slot is None:
        return state
    new_state, plan = _begin(state)
    restore_refs(new_state.ledger, slot.ingredient_refs)
    return _store(new_state, set_slot(plan, address, None))


def duplicate_slot(state: PlannerState, source: SlotAddress, target: SlotAddress) -> PlannerState:
    """Copy a slot over another; the copy does not consume and the overwritten slot is not refunded."""
    if source == target or not _addresses_valid(state, source, target):
        return state
    source_slot = _read(state, source)
    if source_slot is None:
        return state
    new_state, plan = _begin(state)
    return _store(new_state, set_slot(plan, target, source_slot))


def make_leftovers(state: PlannerState, address: SlotAddress) -> PlannerState:
    """Copy a slot to the next day's lunch for the same target, flagged as leftovers."""
    if not _addresses_valid(state, address) or address.day >= DAYS_PER_WEEK - 1:
        return state
    source_slot = _read(state, address)
    if source_slot is None:
        return state
    leftovers = source_slot.copy()
    leftovers.is_leftovers = True
    new_state, plan = _begin(state)
    return _store(new_state, set_slot(plan, address.moved(LEFTOVERS_MEAL_TYPE, address.day + 1), leftovers))


def set_servings(state: PlannerState, address: SlotAddress, servings) -> PlannerState:
    """Rescale a slot's refs to a new serving count and apply only the net stock change."""
    if not isinstance(servings, (int, float)) or not _addresses_valid(state, address):
        return state
    slot = _read(state, address)
    if slot is None:
        return state
    new_servings = max(1, int(math.floor(servings)))
    previous = slot.servings or 1
    if new_servings == previous:
        return state
    ratio = new_servings / previous

    updated = slot.copy()
    updated.servings = new_servings
    updated.ingredient_refs = [
        IngredientRef(ref.name, max(MIN_QTY, ref.qty * ratio), ref.ingredient_id)
        for ref in slot.ingredient_refs
    ]
    new_state, plan = _begin(state)
    apply_ref_deltas(new_state.ledger, slot.ingredient_refs, updated.ingredient_refs)
    logger.debug(f"Rescaled {address} from {previous} to {new_servings} servings")
    return _store(new_state, set_slot(plan, address, updated))


def save_slot_as_meal(state: PlannerState, address: SlotAddress, name: str) -> PlannerState:
    """Create a pinned meal template from a slot's refs; grid and ledger are unchanged."""
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed or not _addresses_valid(state, address):
        return state
    slot = _read(state, address)
    if slot is None:
        return state
    new_state = state.clone()
    lines = []
    for ref in slot.ingredient_refs:
        ingredient = new_state.ledger.resolve(ref.ingredient_id, ref.name)
        lines.append(MealIngredient(ref.name, ref.qty, ingredient.category if ingredient else None))
    meal = Meal(name=trimmed, ingredients=lines, servings_default=slot.servings or DEFAULT_SERVINGS, pinned=True)
    new_state.meals.insert(0, meal)
    new_state.pinned_meal_ids.insert(0, meal.id)
    logger.debug(f"Saved {address} as meal '{meal.name}' ({meal.id})")
    return new_state
