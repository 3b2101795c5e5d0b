import unittest

from planner.domain.Ingredient import Ingredient
from planner.domain.Profile import Profile
from planner.domain.WeekPlan import IngredientRef, SlotAddress, SlotEntry
from planner.logic.consumption import drop_meal
from planner.logic.grid.addressing import set_slot
from planner.logic.reporting.grid_export import build_week_grid_payload
from planner.logic.reporting.nutrition import compute_week_nutrition, slot_nutrition

from state_builders import make_state, WEEK


class TestNutrition(unittest.TestCase):

    def setUp(self):
        self.state = make_state(
            ingredients=[
                Ingredient("chicken", count=4, calories=200, protein_g=30, id="ing-chicken"),
                Ingredient("rice", count=10, calories=100, carbs_g=20, id="ing-rice"),
            ],
            profiles=[
                Profile(name="Me", id="p-me", goal_enabled=True, daily_calorie_goal=2000),
                Profile(name="Kid", id="p-kid"),
            ],
        )
        plan = self.state.current_plan()
        plan = set_slot(plan, SlotAddress("dinner", 0), SlotEntry([IngredientRef("chicken", 2, "ing-chicken")]))
        plan = set_slot(plan, SlotAddress("lunch", 0, "profile", "p-kid"),
                        SlotEntry([IngredientRef("Rice", 1)]))
        self.state.week_plans[WEEK] = plan

    def test_slot_nutrition_scales_by_qty(self):
        slot = SlotEntry([IngredientRef("chicken", 2, "ing-chicken"), IngredientRef("unknown", 5)])
        totals = slot_nutrition(slot, self.state.ledger)
        self.assertEqual(totals, {"calories": 400, "protein_g": 60, "carbs_g": 0, "fat_g": 0})

    def test_family_counts_for_everyone(self):
        report = compute_week_nutrition(self.state)
        self.assertEqual(report['weekStartDate'], WEEK)
        self.assertEqual(len(report['days']), 7)
        monday = report['days'][0]
        self.assertEqual(monday['date'], WEEK)
        self.assertEqual(monday['profiles']['p-me']['calories'], 400)
        self.assertEqual(monday['profiles']['p-kid']['calories'], 500)
        self.assertEqual(monday['profiles']['p-me']['goals'], {"daily_calorie_goal": 20})
        self.assertEqual(monday['profiles']['p-kid']['goals'], {})
        self.assertEqual(report['days'][1]['profiles']['p-me']['calories'], 0)
        self.assertEqual(report['week_totals']['p-kid']['carbs_g'], 20)

    def test_unknown_week_is_all_zero(self):
        report = compute_week_nutrition(self.state, "2030-01-07")
        self.assertTrue(all(p['calories'] == 0 for d in report['days'] for p in d['profiles'].values()))


class TestGridExport(unittest.TestCase):

    def setUp(self):
        state = make_state()
        state.profiles.append(Profile(name="Kid", id="p-kid"))
        state = drop_meal(state, SlotAddress("dinner", 0), "meal-cr")
        plan = set_slot(state.current_plan(), SlotAddress("dinner", 0, "profile", "p-kid"),
                        SlotEntry([IngredientRef("bread", 1)], servings=1, ad_hoc_meal_name="Toast",
                                  is_leftovers=True))
        state.week_plans[WEEK] = plan
        self.state = state

    def test_payload_shape(self):
        payload = build_week_grid_payload(self.state)
        self.assertEqual(payload['weekStartDate'], WEEK)
        grid = payload['weekPlan']['grid']
        self.assertEqual(set(grid), {"breakfast", "lunch", "dinner", "snack"})
        self.assertTrue(all(len(row) == 7 for row in grid.values()))
        self.assertIsNone(grid['breakfast'][0])

    def test_cell_is_flattened_with_labels(self):
        cell = build_week_grid_payload(self.state)['weekPlan']['grid']['dinner'][0]
        self.assertEqual(cell['mealName'], "Family: Chicken + Rice | Kid: Toast")
        self.assertEqual(cell['servings'], 3)
        self.assertFalse(cell['isLeftovers'])
        self.assertIn({"name": "Kid: bread", "qty": 1}, cell['ingredients'])
        self.assertIn({"name": "Family: rice", "qty": 4}, cell['ingredients'])


if __name__ == '__main__':
    unittest.main()
