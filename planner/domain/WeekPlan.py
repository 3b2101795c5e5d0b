"""Week plan domain entities: slot addresses, ingredient refs, slots, cells and the weekly grid.

A WeekPlan grid holds, per meal type, seven day columns of ``CellEntry | None``.
Each cell carries one optional family slot plus optional per-profile slots. A cell
whose every slot is empty is stored as ``None``.
"""
from typing import Dict, List, Optional

from planner.domain.Ingredient import canonical_name
from planner.utilities.constants import (
    MEAL_TYPES, DAYS_PER_WEEK, TARGET_FAMILY, TARGET_PROFILE, DEFAULT_SERVINGS
)


class SlotAddress:
    def __init__(self, meal_type: str, day: int, target_type: str = TARGET_FAMILY,
                 profile_id: Optional[str] = None):
        self.meal_type = meal_type
        self.day = day
        self.target_type = target_type
        self.profile_id = profile_id if target_type == TARGET_PROFILE else None

    def is_valid(self, profile_ids) -> bool:
        if self.meal_type not in MEAL_TYPES:
            return False
        if not isinstance(self.day, int) or not 0 <= self.day < DAYS_PER_WEEK:
            return False
        if self.target_type == TARGET_FAMILY:
            return True
        return self.target_type == TARGET_PROFILE and self.profile_id in profile_ids

    def moved(self, meal_type: str, day: int) -> "SlotAddress":
        """Same target at another grid position."""
        return SlotAddress(meal_type, day, self.target_type, self.profile_id)

    def _key(self):
        return (self.meal_type, self.day, self.target_type, self.profile_id)

    def __eq__(self, other):
        return isinstance(other, SlotAddress) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        target = self.profile_id if self.target_type == TARGET_PROFILE else TARGET_FAMILY
        return f"SlotAddress({self.meal_type}, day={self.day}, {target})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return SlotAddress(
            meal_type=d.get("mealType"),
            day=d.get("day"),
            target_type=d.get("targetType", TARGET_FAMILY),
            profile_id=d.get("profileId"),
        )

    def to_dict(self):
        data = {"mealType": self.meal_type, "day": self.day, "targetType": self.target_type}
        if self.profile_id:
            data["profileId"] = self.profile_id
        return data


class IngredientRef:
    def __init__(self, name: str = "", qty: float = 1, ingredient_id: Optional[str] = None):
        self.ingredient_id = ingredient_id
        self.name = name
        self.qty = qty

    @property
    def key(self) -> str:
        """Same-ingredient key: the bound id, else the canonical name."""
        if self.ingredient_id:
            return f"id:{self.ingredient_id}"
        return f"name:{canonical_name(self.name)}"

    def copy(self) -> "IngredientRef":
        return IngredientRef(self.name, self.qty, self.ingredient_id)

    def __repr__(self):
        return f"IngredientRef({self.name!r}, qty={self.qty}, id={self.ingredient_id})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        qty = d.get("qty")
        return IngredientRef(
            name=str(d.get("name") or ""),
            qty=float(qty) if isinstance(qty, (int, float)) else 1,
            ingredient_id=d.get("ingredientId") or None,
        )

    def to_dict(self):
        data = {"name": self.name, "qty": self.qty}
        if self.ingredient_id:
            data["ingredientId"] = self.ingredient_id
        return data


def add_ingredient_ref(refs: List[IngredientRef], incoming: IngredientRef) -> List[IngredientRef]:
    """Return a new ref list with ``incoming`` merged into the ref sharing its key."""
    copy = [ref.copy() for ref in refs]
    for ref in copy:
        if ref.key == incoming.key:
            ref.qty += incoming.qty
            return copy
    copy.append(incoming.copy())
    return copy


class SlotEntry:
    def __init__(self, ingredient_refs: Optional[List[IngredientRef]] = None,
                 servings: int = DEFAULT_SERVINGS, meal_id: Optional[str] = None,
                 ad_hoc_meal_name: Optional[str] = None, notes: Optional[str] = None,
                 is_leftovers: bool = False):
        self.meal_id = meal_id
        self.ad_hoc_meal_name = ad_hoc_meal_name
        self.ingredient_refs = [ref.copy() for ref in ingredient_refs] if ingredient_refs else []
        self.servings = servings
        self.notes = notes
        self.is_leftovers = bool(is_leftovers)

    def copy(self) -> "SlotEntry":
        return SlotEntry(self.ingredient_refs, self.servings, self.meal_id,
                         self.ad_hoc_meal_name, self.notes, self.is_leftovers)

    def __repr__(self):
        label = self.meal_id or self.ad_hoc_meal_name or "-"
        return f"SlotEntry({label}, servings={self.servings}, refs={self.ingredient_refs})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        servings = d.get("servings")
        return SlotEntry(
            ingredient_refs=[IngredientRef.from_dict(r) for r in d.get("ingredientRefs") or []
                             if isinstance(r, dict)],
            servings=max(1, int(servings)) if isinstance(servings, (int, float)) else DEFAULT_SERVINGS,
            meal_id=d.get("mealId") or None,
            ad_hoc_meal_name=d.get("adHocMealName") or None,
            notes=d.get("notes"),
            is_leftovers=d.get("isLeftovers", False),
        )

    def to_dict(self):
        data = {
            "ingredientRefs": [r.to_dict() for r in self.ingredient_refs],
            "servings": self.servings,
        }
        if self.meal_id:
            data["mealId"] = self.meal_id
        if self.ad_hoc_meal_name:
            data["adHocMealName"] = self.ad_hoc_meal_name
        if self.notes is not None:
            data["notes"] = self.notes
        if self.is_leftovers:
            data["isLeftovers"] = True
        return data


class CellEntry:
    def __init__(self, family: Optional[SlotEntry] = None,
                 profiles: Optional[Dict[str, Optional[SlotEntry]]] = None):
        self.family = family
        self.profiles: Dict[str, Optional[SlotEntry]] = dict(profiles) if profiles else {}

    def is_empty(self) -> bool:
        return self.family is None and all(slot is None for slot in self.profiles.values())

    def get(self, address: SlotAddress) -> Optional[SlotEntry]:
        if address.target_type == TARGET_FAMILY:
            return self.family
        return self.profiles.get(address.profile_id)

    def set(self, address: SlotAddress, slot: Optional[SlotEntry]):
        if address.target_type == TARGET_FAMILY:
            self.family = slot
        elif slot is None:
            self.profiles.pop(address.profile_id, None)
        else:
            self.profiles[address.profile_id] = slot

    def slots(self):
        """Yield (profile_id or None, slot) for every non-empty slot in the cell."""
        if self.family is not None:
            yield None, self.family
        for profile_id, slot in self.profiles.items():
            if slot is not None:
                yield profile_id, slot

    def copy(self) -> "CellEntry":
        return CellEntry(
            self.family.copy() if self.family else None,
            {pid: slot.copy() if slot else None for pid, slot in self.profiles.items()},
        )

    @staticmethod
    def from_dict(data) -> Optional["CellEntry"]:
        if not isinstance(data, dict):
            return None
        family = data.get("family")
        profiles = data.get("profiles") or {}
        cell = CellEntry(
            SlotEntry.from_dict(family) if isinstance(family, dict) else None,
            {pid: SlotEntry.from_dict(slot) for pid, slot in profiles.items() if isinstance(slot, dict)},
        )
        return None if cell.is_empty() else cell

    def to_dict(self):
        return {
            "family": self.family.to_dict() if self.family else None,
            "profiles": {pid: slot.to_dict() if slot else None for pid, slot in self.profiles.items()},
        }


def _empty_row() -> List[Optional[CellEntry]]:
    return [None] * DAYS_PER_WEEK


class WeekPlan:
    def __init__(self, week_start_date: str, grid: Optional[Dict[str, List[Optional[CellEntry]]]] = None):
        self.week_start_date = week_start_date
        self.grid = {meal_type: _empty_row() for meal_type in MEAL_TYPES}
        for meal_type, row in (grid or {}).items():
            if meal_type in self.grid:
                cells = list(row)[:DAYS_PER_WEEK]
                self.grid[meal_type] = cells + [None] * (DAYS_PER_WEEK - len(cells))

    def get_cell(self, meal_type: str, day: int) -> Optional[CellEntry]:
        return self.grid[meal_type][day]

    def set_cell(self, meal_type: str, day: int, cell: Optional[CellEntry]):
        self.grid[meal_type][day] = None if cell is None or cell.is_empty() else cell

    def cells(self):
        """Yield (meal_type, day, cell) for every non-empty cell."""
        for meal_type in MEAL_TYPES:
            for day, cell in enumerate(self.grid[meal_type]):
                if cell is not None:
                    yield meal_type, day, cell

    def clone(self) -> "WeekPlan":
        return WeekPlan(self.week_start_date, {
            meal_type: [cell.copy() if cell else None for cell in row]
            for meal_type, row in self.grid.items()
        })

    def __repr__(self):
        return f"WeekPlan({self.week_start_date}, cells={sum(1 for _ in self.cells())})"

    @staticmethod
    def from_dict(data, week_start_date: Optional[str] = None) -> "WeekPlan":
        d = dict(data) if isinstance(data, dict) else {}
        grid = d.get("grid") if isinstance(d.get("grid"), dict) else {}
        return WeekPlan(
            d.get("weekStartDate") or week_start_date,
            {meal_type: [CellEntry.from_dict(c) for c in row]
             for meal_type, row in grid.items() if isinstance(row, list)},
        )

    def to_dict(self):
        return {
            "weekStartDate": self.week_start_date,
            "grid": {meal_type: [cell.to_dict() if cell else None for cell in row]
                     for meal_type, row in self.grid.items()},
        }
