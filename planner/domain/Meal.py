"""Meal domain entity: a named template of ingredient lines with a default serving count."""
from typing import List, Optional

from planner.utilities.constants import DEFAULT_SERVINGS, MIN_QTY
from planner.utilities.ids import create_id, now_iso


class MealIngredient:
    def __init__(self, name: str = "", qty: float = 1, category: Optional[str] = None):
        self.name = name
        self.qty = qty
        self.category = category

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        qty = d.get("qty")
        return MealIngredient(
            name=str(d.get("name") or ""),
            qty=max(MIN_QTY, float(qty)) if isinstance(qty, (int, float)) else 1,
            category=d.get("category"),
        )

    def to_dict(self):
        data = {"name": self.name, "qty": self.qty}
        if self.category:
            data["category"] = self.category
        return data


class Meal:
    def __init__(self, name: str = "", ingredients: Optional[List[MealIngredient]] = None,
                 servings_default: int = DEFAULT_SERVINGS, calories_per_serving: Optional[float] = None,
                 pinned: bool = False, id: Optional[str] = None, created_at: Optional[str] = None):
        self.id = id or create_id("meal")
        self.name = name
        self.ingredients = ingredients[:] if ingredients else []
        self.servings_default = max(1, int(servings_default or DEFAULT_SERVINGS))
        self.calories_per_serving = calories_per_serving
        self.pinned = bool(pinned)
        self.created_at = created_at or now_iso()

    def __str__(self) -> str:
        names = ", ".join(i.name for i in self.ingredients)
        return f"{self.name} - {self.servings_default} servings - {names}"

    __repr__ = __str__

    def clone(self) -> "Meal":
        return Meal.from_dict(self.to_dict())

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Meal(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            ingredients=[MealIngredient.from_dict(i) for i in d.get("ingredients") or []],
            servings_default=d.get("servingsDefault") or DEFAULT_SERVINGS,
            calories_per_serving=d.get("caloriesPerServing"),
            pinned=d.get("pinned", False),
            created_at=d.get("createdAt"),
        )

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "servingsDefault": self.servings_default,
            "pinned": self.pinned,
            "createdAt": self.created_at,
        }
        if self.calories_per_serving is not None:
            data["caloriesPerServing"] = self.calories_per_serving
        return data
