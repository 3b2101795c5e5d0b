"""Demo seed: a few staples, three pinned meals, one profile and an empty current week."""
from planner.domain.Ingredient import Ingredient
from planner.domain.Ledger import Ledger
from planner.domain.Meal import Meal, MealIngredient
from planner.domain.PlannerState import PlannerState
from planner.domain.Profile import Profile
from planner.domain.WeekPlan import WeekPlan
from planner.utilities.dates import current_week_start

DEMO_INGREDIENTS = [
    ('chicken', 'Protein', 4),
    ('pork', 'Protein', 3),
    ('steak', 'Protein', 2),
    ('cheese', 'Dairy', 5),
    ('milk', 'Dairy', 2),
    ('eggs', 'Dairy', 12),
    ('lettuce', 'Produce', 2),
    ('carrots', 'Produce', 6),
    ('cucumber', 'Produce', 3),
    ('bread', 'Pantry', 2),
    ('penne', 'Pantry', 2),
    ('spaghetti', 'Pantry', 2),
]

DEMO_MEALS = [
    ('Chicken + Penne', [('chicken', 'Protein'), ('penne', 'Pantry')]),
    ('Spaghetti + Meatballs', [('spaghetti', 'Pantry'), ('meatballs', 'Protein')]),
    ('Bacon + Egg + Cheese', [('bacon', 'Protein'), ('eggs', 'Dairy'), ('cheese', 'Dairy')]),
]


def create_demo_state() -> PlannerState:
    week = current_week_start()
    meals = [
        Meal(name=name, pinned=True, servings_default=2,
             ingredients=[MealIngredient(n, 1, c) for n, c in lines])
        for name, lines in DEMO_MEALS
    ]
    return PlannerState(
        ledger=Ledger(Ingredient(name=n, category=c, count=count) for n, c, count in DEMO_INGREDIENTS),
        meals=meals,
        profiles=[Profile()],
        pinned_meal_ids=[m.id for m in meals],
        week_plans={week: WeekPlan(week)},
        current_week_start_date=week,
    )
