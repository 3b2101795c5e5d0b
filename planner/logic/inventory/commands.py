"""Ledger, meal-template, profile and category commands.

Same contract as the consumption engine: pure ``(state, ...) -> state`` functions,
returning the input unchanged on a no-op. ``delete_profile`` is the one command that
raises, refusing to remove the last profile.
"""
from __future__ import annotations
import logging
from typing import Optional

from planner.domain.Meal import Meal, MealIngredient
from planner.domain.PlannerState import PlannerState
from planner.domain.Profile import LastProfileError, Profile, GOAL_FIELDS
from planner.utilities.constants import CATEGORIES, DEFAULT_CATEGORY, INVENTORY_SORTS

logger = logging.getLogger(__name__)


# -------------------- Ingredients --------------------
def add_or_merge_ingredient(state: PlannerState, name: str, count: float = 0, **fields) -> PlannerState:
    if not isinstance(name, str) or not name.strip():
        return state
    new_state = state.clone()
    new_state.ledger.merge_or_create(name, count, custom_categories=new_state.custom_categories, **fields)
    return new_state


def update_ingredient(state: PlannerState, ingredient_id: str, **patch) -> PlannerState:
    if state.ledger.find(ingredient_id) is None:
        return state
    new_state = state.clone()
    new_state.ledger.update(ingredient_id, patch, custom_categories=new_state.custom_categories)
    if new_state.ledger.find(ingredient_id).to_dict() == state.ledger.find(ingredient_id).to_dict():
        return state
    return new_state


def adjust_ingredient_count(state: PlannerState, ingredient_id: str, delta: float) -> PlannerState:
    if state.ledger.find(ingredient_id) is None or not isinstance(delta, (int, float)):
        return state
    new_state = state.clone()
    new_state.ledger.adjust_count(ingredient_id, delta)
    return new_state


def delete_ingredient(state: PlannerState, ingredient_id: str) -> PlannerState:
    """Remove an ingredient; slots referencing it keep their refs and fall back to name matching."""
    if state.ledger.find(ingredient_id) is None:
        return state
    new_state = state.clone()
    new_state.ledger.delete(ingredient_id)
    return new_state


def toggle_ingredient_pinned(state: PlannerState, ingredient_id: str) -> PlannerState:
    if state.ledger.find(ingredient_id) is None:
        return state
    new_state = state.clone()
    new_state.ledger.toggle_pinned(ingredient_id)
    return new_state


def clear_inventory(state: PlannerState) -> PlannerState:
    if not state.ledger.items:
        return state
    new_state = state.clone()
    new_state.ledger.clear_all()
    return new_state


def set_inventory_sort(state: PlannerState, value: str) -> PlannerState:
    if value not in INVENTORY_SORTS or value == state.inventory_sort:
        return state
    new_state = state.clone()
    new_state.inventory_sort = value
    return new_state


# -------------------- Custom categories --------------------
def add_custom_category(state: PlannerState, name: str) -> PlannerState:
    label = name.strip() if isinstance(name, str) else ""
    if not label or label in CATEGORIES or label in state.custom_categories:
        return state
    new_state = state.clone()
    new_state.custom_categories.append(label)
    return new_state


def delete_custom_category(state: PlannerState, name: str) -> PlannerState:
    """Drop a custom category; its ingredients fall back to the default category."""
    if name not in state.custom_categories:
        return state
    new_state = state.clone()
    new_state.custom_categories.remove(name)
    for item in new_state.ledger.items:
        if item.category == name:
            item.category = DEFAULT_CATEGORY
    return new_state


# -------------------- Meals --------------------
def _meal_lines(ingredients) -> list:
    lines = []
    for line in ingredients or []:
        if isinstance(line, MealIngredient):
            lines.append(line)
        elif isinstance(line, dict) and str(line.get("name") or "").strip():
            lines.append(MealIngredient.from_dict(line))
    return lines


def add_meal(state: PlannerState, name: str, ingredients=None, servings_default: int = 2,
             calories_per_serving: Optional[float] = None, pinned: bool = False) -> PlannerState:
    if not isinstance(name, str) or not name.strip():
        return state
    new_state = state.clone()
    meal = Meal(name=name.strip(), ingredients=_meal_lines(ingredients), servings_default=servings_default,
                calories_per_serving=calories_per_serving, pinned=pinned)
    new_state.meals.insert(0, meal)
    if meal.pinned:
        new_state.pinned_meal_ids.append(meal.id)
    return new_state


def update_meal(state: PlannerState, meal_id: str, **patch) -> PlannerState:
    """Edit a template; slots already holding a copy of it are not affected."""
    if state.find_meal(meal_id) is None:
        return state
    new_state = state.clone()
    meal = new_state.find_meal(meal_id)
    if isinstance(patch.get("name"), str) and patch["name"].strip():
        meal.name = patch["name"].strip()
    if patch.get("ingredients") is not None:
        meal.ingredients = _meal_lines(patch["ingredients"])
    if patch.get("servings_default") is not None:
        meal.servings_default = max(1, int(patch["servings_default"]))
    if "calories_per_serving" in patch:
        meal.calories_per_serving = patch["calories_per_serving"]
    if meal.to_dict() == state.find_meal(meal_id).to_dict():
        return state
    return new_state


def delete_meal(state: PlannerState, meal_id: str) -> PlannerState:
    if state.find_meal(meal_id) is None:
        return state
    new_state = state.clone()
    new_state.meals = [m for m in new_state.meals if m.id != meal_id]
    new_state.pinned_meal_ids = [i for i in new_state.pinned_meal_ids if i != meal_id]
    return new_state


def toggle_meal_pinned(state: PlannerState, meal_id: str) -> PlannerState:
    if state.find_meal(meal_id) is None:
        return state
    new_state = state.clone()
    meal = new_state.find_meal(meal_id)
    if meal_id in new_state.pinned_meal_ids:
        new_state.pinned_meal_ids.remove(meal_id)
        meal.pinned = False
    else:
        new_state.pinned_meal_ids.append(meal_id)
        meal.pinned = True
    return new_state


def move_pinned_meal(state: PlannerState, meal_id: str, direction: str) -> PlannerState:
    """Swap a pinned meal with its left or right neighbour in the pinned order."""
    if meal_id not in state.pinned_meal_ids or direction not in ("left", "right"):
        return state
    index = state.pinned_meal_ids.index(meal_id)
    target = index - 1 if direction == "left" else index + 1
    if target < 0 or target >= len(state.pinned_meal_ids):
        return state
    new_state = state.clone()
    order = new_state.pinned_meal_ids
    order[index], order[target] = order[target], order[index]
    return new_state


# -------------------- Profiles --------------------
def add_profile(state: PlannerState, name: str, color: Optional[str] = None, **goals) -> PlannerState:
    if not isinstance(name, str) or not name.strip():
        return state
    new_state = state.clone()
    kwargs = {k: v for k, v in goals.items() if k in GOAL_FIELDS or k == "goal_enabled"}
    profile = Profile(name=name.strip(), **kwargs)
    if color:
        profile.color = color
    new_state.profiles.append(profile)
    return new_state


def update_profile(state: PlannerState, profile_id: str, **patch) -> PlannerState:
    if state.find_profile(profile_id) is None:
        return state
    new_state = state.clone()
    profile = new_state.find_profile(profile_id)
    if isinstance(patch.get("name"), str) and patch["name"].strip():
        profile.name = patch["name"].strip()
    if patch.get("color"):
        profile.color = patch["color"]
    if patch.get("goal_enabled") is not None:
        profile.goal_enabled = bool(patch["goal_enabled"])
    for attr in GOAL_FIELDS:
        if attr in patch:
            value = patch[attr]
            setattr(profile, attr, max(0, value) if isinstance(value, (int, float)) else None)
    if profile.to_dict() == state.find_profile(profile_id).to_dict():
        return state
    return new_state


def delete_profile(state: PlannerState, profile_id: str) -> PlannerState:
    """Remove a profile and its slots in every week (no refund).

    Raises LastProfileError when it is the only profile left.
    """
    if state.find_profile(profile_id) is None:
        return state
    if len(state.profiles) <= 1:
        logger.warning(f"Refused to delete the last profile ({profile_id})")
        raise LastProfileError("At least one profile must remain")
    new_state = state.clone()
    new_state.profiles = [p for p in new_state.profiles if p.id != profile_id]
    for plan in new_state.week_plans.values():
        for meal_type, day, cell in list(plan.cells()):
            if profile_id in cell.profiles:
                del cell.profiles[profile_id]
                plan.set_cell(meal_type, day, cell)
    return new_state
