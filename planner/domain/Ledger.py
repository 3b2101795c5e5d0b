"""Ledger aggregate: the ingredient inventory and every count mutation applied to it."""
import logging
from typing import List, Optional, Iterable

from planner.domain.Ingredient import (
    Ingredient, canonical_name, clamp_count, clamp_servings_per_count, valid_category, _parse_date,
    NUTRITION_FIELDS
)

logger = logging.getLogger(__name__)

# Fields a caller may supply to merge_or_create / update
PATCHABLE_FIELDS = {
    "name", "category", "count", "servings_per_count", "expiration_date", "notes", "pinned",
} | set(NUTRITION_FIELDS)


class Ledger:
    def __init__(self, items: Optional[Iterable[Ingredient]] = None):
        self.items: List[Ingredient] = list(items) if items else []

    # --- Lookup ----------------------------------------------------------
    def find(self, ingredient_id: Optional[str]) -> Optional[Ingredient]:
        if not ingredient_id:
            return None
        for item in self.items:
            if item.id == ingredient_id:
                return item
        return None

    def find_by_name(self, name: str) -> Optional[Ingredient]:
        key = canonical_name(name)
        if not key:
            return None
        for item in self.items:
            if item.key == key:
                return item
        return None

    def resolve(self, ingredient_id: Optional[str], name: str = "") -> Optional[Ingredient]:
        """Weak reference lookup: the id when it still resolves, else the canonical name."""
        return self.find(ingredient_id) or self.find_by_name(name)

    def get_items(self) -> List[Ingredient]:
        return self.items

    # --- Mutations -------------------------------------------------------
    def merge_or_create(self, name: str, count: float = 0, custom_categories=(), **fields) -> Ingredient:
        '''
        Adds stock to the ingredient with the same canonical name, or creates it.
        Only fields explicitly supplied (not None) overwrite the existing record.
        '''
        existing = self.find_by_name(name)
        if existing:
            existing.set_count(existing.count + (count or 0))
            self._apply_fields(existing, fields, custom_categories)
            logger.debug(f"Merged {count} into ingredient '{existing.name}' -> {existing.count}")
            return existing

        ingredient = Ingredient(name=name.strip(), count=0)
        ingredient.set_count(count or 0)
        self._apply_fields(ingredient, fields, custom_categories)
        ingredient.category = valid_category(fields.get("category"), custom_categories)
        # Newest first, like the inventory list is displayed
        self.items.insert(0, ingredient)
        logger.debug(f"Created ingredient '{ingredient.name}' ({ingredient.id})")
        return ingredient

    def update(self, ingredient_id: str, patch: dict, custom_categories=()) -> bool:
        '''Applies a partial patch; count and servings_per_count are clamped to their domains.'''
        item = self.find(ingredient_id)
        if item is None:
            return False
        fields = dict(patch)
        if "name" in fields and isinstance(fields["name"], str) and fields["name"].strip():
            item.name = fields["name"].strip()
        if "count" in fields and fields["count"] is not None:
            item.set_count(fields["count"])
        # An explicit None clears optional fields
        for f in ("expiration_date", "notes") + NUTRITION_FIELDS:
            if f in fields and fields[f] is None:
                setattr(item, f, None)
        self._apply_fields(item, fields, custom_categories)
        return True

    def adjust_count(self, ingredient_id: str, delta: float) -> bool:
        item = self.find(ingredient_id)
        if item is None:
            return False
        item.adjust_count(delta)
        return True

    def delete(self, ingredient_id: str) -> bool:
        item = self.find(ingredient_id)
        if item is None:
            return False
        self.items.remove(item)
        return True

    def toggle_pinned(self, ingredient_id: str) -> bool:
        item = self.find(ingredient_id)
        if item is None:
            return False
        item.pinned = not item.pinned
        return True

    def clear_all(self):
        self.items = []

    def consume(self, ingredient: Ingredient, qty: float):
        """Decrement stock by a quantity expressed in serving units."""
        ingredient.adjust_count(-ingredient.stock_delta(qty))

    def restore(self, ingredient: Ingredient, qty: float):
        """Return a quantity expressed in serving units back to stock."""
        ingredient.adjust_count(ingredient.stock_delta(qty))

    @staticmethod
    def _apply_fields(item: Ingredient, fields: dict, custom_categories):
        if fields.get("category") is not None:
            item.category = valid_category(fields["category"], custom_categories)
        if fields.get("servings_per_count") is not None:
            item.servings_per_count = clamp_servings_per_count(fields["servings_per_count"])
        if fields.get("expiration_date") is not None:
            item.expiration_date = _parse_date(fields["expiration_date"])
        if fields.get("notes") is not None:
            item.notes = fields["notes"]
        if fields.get("pinned") is not None:
            item.pinned = bool(fields["pinned"])
        for f in NUTRITION_FIELDS:
            if fields.get(f) is not None:
                setattr(item, f, clamp_count(fields[f]))

    # --- Persistence -----------------------------------------------------
    def clone(self) -> "Ledger":
        return Ledger(item.clone() for item in self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Items:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_dict(data) -> "Ledger":
        return Ledger(Ingredient.from_dict(entry) for entry in (data or []) if isinstance(entry, dict))

    def to_dict(self):
        return [item.to_dict() for item in self.items]
