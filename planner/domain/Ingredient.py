"""Ingredient domain entity: on-hand stock item with serving conversion and nutrition."""
import re
from datetime import date, datetime
from typing import Optional

from planner.utilities.constants import (
    CATEGORIES, DEFAULT_CATEGORY, DATE_FORMAT, MIN_SERVINGS_PER_COUNT, COUNT_PRECISION
)
from planner.utilities.ids import create_id, now_iso

_NON_ALNUM = re.compile(r'[^a-z0-9]+')
NUTRITION_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g")

# Singulars ending in "ie": their plural only drops the "s"
IE_STEMS = {
    "pie", "cookie", "brownie", "veggie", "smoothie", "hoagie", "calorie", "rotisserie",
}


def _singular(word: str) -> str:
    """Basic plural -> singular heuristics for the last word of a name."""
    if len(word) <= 3:
        return word
    if word.endswith('ies'):
        if word[:-1] in IE_STEMS:
            return word[:-1]
        return word[:-3] + 'y'
    if word.endswith('oes'):  # tomatoes -> tomato
        return word[:-2]
    if word.endswith(('ches', 'shes', 'xes', 'zes')):
        return word[:-2]
    if word.endswith(('ss', 'us', 'is')):
        return word
    if word.endswith('s'):
        return word[:-1]
    return word


def canonical_name(name) -> str:
    """Identity key for ingredient matching: lowercase, trimmed, non-alphanumerics
    collapsed to single spaces, final word singularized ("Eggs" == "egg")."""
    if not isinstance(name, str):
        return ""
    n = _NON_ALNUM.sub(' ', name.lower()).strip()
    if not n:
        return ""
    words = n.split(' ')
    words[-1] = _singular(words[-1])
    return ' '.join(words)


def round_count(value: float) -> float:
    return round(float(value), COUNT_PRECISION)


def clamp_count(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, v)


def clamp_servings_per_count(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 1.0
    return max(MIN_SERVINGS_PER_COUNT, v)


def _parse_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.strptime(value[:10], DATE_FORMAT).date()
        except ValueError:
            return None
    return None


class Ingredient:
    def __init__(self, name: str = "", category: str = DEFAULT_CATEGORY, count: float = 0,
                 servings_per_count: float = 1, expiration_date: Optional[date] = None,
                 notes: Optional[str] = None, pinned: bool = False,
                 calories: Optional[float] = None, protein_g: Optional[float] = None,
                 carbs_g: Optional[float] = None, fat_g: Optional[float] = None,
                 id: Optional[str] = None, created_at: Optional[str] = None):
        self.id = id or create_id("ingredient")
        self.name = name
        self.category = category or DEFAULT_CATEGORY
        self.count = clamp_count(count)
        self.servings_per_count = clamp_servings_per_count(servings_per_count)
        self.expiration_date = _parse_date(expiration_date)
        self.notes = notes
        self.pinned = bool(pinned)
        self.calories = calories
        self.protein_g = protein_g
        self.carbs_g = carbs_g
        self.fat_g = fat_g
        self.created_at = created_at or now_iso()

    @property
    def key(self) -> str:
        return canonical_name(self.name)

    def set_count(self, value: float):
        '''Sets the stock count, clamped at zero and rounded to avoid float drift.'''
        self.count = round_count(clamp_count(value))

    def adjust_count(self, delta: float):
        '''Adjusts the count by the specified delta (can be negative).'''
        self.set_count(self.count + delta)

    def stock_delta(self, qty: float) -> float:
        """Convert a quantity in serving units to stock-count units."""
        return qty / self.servings_per_count

    def nutrition(self) -> dict:
        return {f: getattr(self, f) or 0 for f in NUTRITION_FIELDS}

    def clone(self) -> "Ingredient":
        return Ingredient.from_dict(self.to_dict())

    def __str__(self) -> str:
        parts = [f"{self.name} - {self.count:g} ({self.category})"]
        if self.expiration_date:
            parts.append(f"Exp: {self.expiration_date.strftime(DATE_FORMAT)}")
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient object from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        category = d.get("category")
        return Ingredient(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            category=category if isinstance(category, str) and category else DEFAULT_CATEGORY,
            count=d.get("count", 0),
            servings_per_count=d.get("servingsPerCount", 1),
            expiration_date=d.get("expirationDate"),
            notes=d.get("notes"),
            pinned=d.get("pinned", False),
            calories=d.get("calories"),
            protein_g=d.get("protein_g"),
            carbs_g=d.get("carbs_g"),
            fat_g=d.get("fat_g"),
            created_at=d.get("createdAt"),
        )

    def to_dict(self):
        '''Converts the Ingredient object to a dictionary for JSON persistence.'''
        data = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "count": self.count,
            "servingsPerCount": self.servings_per_count,
            "pinned": self.pinned,
            "createdAt": self.created_at,
        }
        if self.expiration_date:
            data["expirationDate"] = self.expiration_date.strftime(DATE_FORMAT)
        if self.notes is not None:
            data["notes"] = self.notes
        for f in NUTRITION_FIELDS:
            if getattr(self, f) is not None:
                data[f] = getattr(self, f)
        return data


def valid_category(category, custom_categories=()) -> str:
    if isinstance(category, str) and (category in CATEGORIES or category in custom_categories):
        return category
    return DEFAULT_CATEGORY
