"""Upgrade stored week-plan cells to the current ``{family, profiles}`` shape.

Older backups stored a cell as one of:
  * a flat list of ingredient lines                -> family slot holding those refs
  * a single slot (``ingredientRefs``/``assignedTo``) -> family slot
  * a bare ``{profileId: slot}`` map                -> per-profile slots

Cells are classified first and converted by the matching handler, so the
consumption engine only ever sees canonical CellEntry objects.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, Optional

from planner.domain.WeekPlan import CellEntry, IngredientRef, SlotEntry, WeekPlan
from planner.utilities.constants import MEAL_TYPES

logger = logging.getLogger(__name__)

EMPTY = "empty"
CANONICAL = "canonical"
FLAT_LIST = "flat_list"
SINGLE_SLOT = "single_slot"
PROFILE_MAP = "profile_map"
UNKNOWN = "unknown"

_SLOT_KEYS = {"ingredientRefs", "ingredients", "mealId", "adHocMealName", "servings", "assignedTo"}


def classify_cell(raw: Any) -> str:
    if raw is None:
        return EMPTY
    if isinstance(raw, list):
        return FLAT_LIST
    if not isinstance(raw, dict):
        return UNKNOWN
    if "family" in raw or "profiles" in raw:
        return CANONICAL
    if _SLOT_KEYS & set(raw):
        return SINGLE_SLOT
    if all(v is None or isinstance(v, dict) for v in raw.values()):
        return PROFILE_MAP
    return UNKNOWN


def _ref(raw) -> Optional[IngredientRef]:
    if isinstance(raw, str) and raw.strip():
        return IngredientRef(raw.strip(), 1)
    if isinstance(raw, dict) and str(raw.get("name") or "").strip():
        return IngredientRef.from_dict(raw)
    return None


def _refs(lines: Iterable) -> list:
    return [r for r in (_ref(line) for line in lines) if r is not None]


def _slot(raw: dict) -> Optional[SlotEntry]:
    slot = SlotEntry.from_dict(raw)
    if not slot.ingredient_refs and isinstance(raw.get("ingredients"), list):
        slot.ingredient_refs = _refs(raw["ingredients"])
    if not slot.ingredient_refs and not slot.meal_id and not slot.ad_hoc_meal_name:
        return None
    return slot


def _from_canonical(raw: dict, profile_ids) -> Optional[CellEntry]:
    family = raw.get("family")
    profiles = raw.get("profiles") if isinstance(raw.get("profiles"), dict) else {}
    return CellEntry(
        _slot(family) if isinstance(family, dict) else None,
        {pid: _slot(slot) for pid, slot in profiles.items() if isinstance(slot, dict) and pid in profile_ids},
    )


def _from_flat_list(raw: list, profile_ids) -> Optional[CellEntry]:
    refs = _refs(raw)
    return CellEntry(SlotEntry(refs)) if refs else None


def _from_single_slot(raw: dict, profile_ids) -> Optional[CellEntry]:
    return CellEntry(_slot(raw))


def _from_profile_map(raw: dict, profile_ids) -> Optional[CellEntry]:
    return CellEntry(None, {pid: _slot(slot) for pid, slot in raw.items()
                            if isinstance(slot, dict) and pid in profile_ids})


_HANDLERS: Dict[str, Callable[[Any, set], Optional[CellEntry]]] = {
    CANONICAL: _from_canonical,
    FLAT_LIST: _from_flat_list,
    SINGLE_SLOT: _from_single_slot,
    PROFILE_MAP: _from_profile_map,
}


def normalize_cell(raw: Any, profile_ids) -> Optional[CellEntry]:
    kind = classify_cell(raw)
    handler = _HANDLERS.get(kind)
    if handler is None:
        if kind == UNKNOWN:
            logger.warning(f"Dropping unrecognized plan cell: {raw!r}")
        return None
    cell = handler(raw, set(profile_ids))
    if cell is None:
        return None
    # Drop profile entries emptied by normalization
    cell.profiles = {pid: slot for pid, slot in cell.profiles.items() if slot is not None}
    return None if cell.is_empty() else cell


def normalize_week_plan(raw: Any, week_start_date: str, profile_ids) -> WeekPlan:
    d = raw if isinstance(raw, dict) else {}
    grid = d.get("grid") if isinstance(d.get("grid"), dict) else {}
    rows = {}
    for meal_type in MEAL_TYPES:
        row = grid.get(meal_type)
        if isinstance(row, list):
            rows[meal_type] = [normalize_cell(cell, profile_ids) for cell in row]
    return WeekPlan(week_start_date, rows)


def normalize_week_plans(raw_plans: Any, profile_ids) -> Dict[str, WeekPlan]:
    if not isinstance(raw_plans, dict):
        return {}
    return {week: normalize_week_plan(plan, week, profile_ids) for week, plan in raw_plans.items()}
