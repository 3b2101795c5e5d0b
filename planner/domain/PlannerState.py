"""PlannerState aggregate: everything a planner command reads and writes.

Commands never mutate a state they were given; they work on ``clone()`` and return
the copy. The same deep copy doubles as the history snapshot.
"""
from typing import Dict, List, Optional

from planner.domain.Ledger import Ledger
from planner.domain.Meal import Meal
from planner.domain.Profile import Profile
from planner.domain.WeekPlan import WeekPlan
from planner.utilities.constants import INVENTORY_SORTS


class PlannerState:
    def __init__(self, ledger: Optional[Ledger] = None, meals: Optional[List[Meal]] = None,
                 profiles: Optional[List[Profile]] = None, custom_categories: Optional[List[str]] = None,
                 pinned_meal_ids: Optional[List[str]] = None,
                 week_plans: Optional[Dict[str, WeekPlan]] = None,
                 current_week_start_date: str = "", inventory_sort: str = "category"):
        self.ledger = ledger or Ledger()
        self.meals = meals[:] if meals else []
        self.profiles = profiles[:] if profiles else [Profile()]
        self.custom_categories = custom_categories[:] if custom_categories else []
        self.pinned_meal_ids = pinned_meal_ids[:] if pinned_meal_ids else []
        self.week_plans = dict(week_plans) if week_plans else {}
        self.current_week_start_date = current_week_start_date
        self.inventory_sort = inventory_sort if inventory_sort in INVENTORY_SORTS else "category"

    @property
    def ingredients(self):
        return self.ledger.items

    def find_meal(self, meal_id: Optional[str]) -> Optional[Meal]:
        for meal in self.meals:
            if meal.id == meal_id:
                return meal
        return None

    def find_profile(self, profile_id: Optional[str]) -> Optional[Profile]:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    def profile_ids(self) -> set:
        return {p.id for p in self.profiles}

    def current_plan(self) -> Optional[WeekPlan]:
        return self.week_plans.get(self.current_week_start_date)

    def clone(self) -> "PlannerState":
        return PlannerState(
            ledger=self.ledger.clone(),
            meals=[m.clone() for m in self.meals],
            profiles=[p.clone() for p in self.profiles],
            custom_categories=list(self.custom_categories),
            pinned_meal_ids=list(self.pinned_meal_ids),
            week_plans={week: plan.clone() for week, plan in self.week_plans.items()},
            current_week_start_date=self.current_week_start_date,
            inventory_sort=self.inventory_sort,
        )

    def __repr__(self):
        return (f"PlannerState(week={self.current_week_start_date}, ingredients={len(self.ingredients)}, "
                f"meals={len(self.meals)}, profiles={len(self.profiles)}, weeks={len(self.week_plans)})")

    @staticmethod
    def from_dict(data) -> "PlannerState":
        '''Builds a state from the canonical export shape (see importing.legacy for older shapes).'''
        d = dict(data) if isinstance(data, dict) else {}
        plans = d.get("weekPlans") or {}
        return PlannerState(
            ledger=Ledger.from_dict(d.get("ingredients")),
            meals=[Meal.from_dict(m) for m in d.get("meals") or [] if isinstance(m, dict)],
            profiles=[Profile.from_dict(p) for p in d.get("profiles") or [] if isinstance(p, dict)],
            custom_categories=[c for c in d.get("customCategories") or [] if isinstance(c, str)],
            pinned_meal_ids=[i for i in d.get("pinnedMealIds") or [] if isinstance(i, str)],
            week_plans={week: WeekPlan.from_dict(plan, week) for week, plan in plans.items()},
            current_week_start_date=d.get("currentWeekStartDate") or "",
            inventory_sort=d.get("inventorySort", "category"),
        )

    def to_dict(self):
        '''Export/backup shape.'''
        return {
            "ingredients": self.ledger.to_dict(),
            "meals": [m.to_dict() for m in self.meals],
            "profiles": [p.to_dict() for p in self.profiles],
            "customCategories": list(self.custom_categories),
            "pinnedMealIds": list(self.pinned_meal_ids),
            "weekPlans": {week: plan.to_dict() for week, plan in self.week_plans.items()},
            "currentWeekStartDate": self.current_week_start_date,
            "inventorySort": self.inventory_sort,
        }
