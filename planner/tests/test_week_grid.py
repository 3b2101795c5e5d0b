import unittest

from planner.domain.PlannerState import PlannerState
from planner.domain.WeekPlan import CellEntry, IngredientRef, SlotAddress, SlotEntry, WeekPlan, add_ingredient_ref
from planner.logic.grid.addressing import ensure_plan, get_slot, set_slot, shift_week, set_week

from state_builders import make_state, WEEK


class TestSlotAddress(unittest.TestCase):

    def test_validity(self):
        profiles = {"p-me"}
        self.assertTrue(SlotAddress("dinner", 0).is_valid(profiles))
        self.assertTrue(SlotAddress("snack", 6, "profile", "p-me").is_valid(profiles))
        self.assertFalse(SlotAddress("brunch", 0).is_valid(profiles))
        self.assertFalse(SlotAddress("dinner", 7).is_valid(profiles))
        self.assertFalse(SlotAddress("dinner", -1).is_valid(profiles))
        self.assertFalse(SlotAddress("dinner", 0, "profile", "p-other").is_valid(profiles))

    def test_family_address_ignores_profile_id(self):
        self.assertEqual(SlotAddress("lunch", 1, "family", "p-me"), SlotAddress("lunch", 1))


class TestIngredientRefs(unittest.TestCase):

    def test_merge_by_id_then_name(self):
        refs = [IngredientRef("Rice", 2, "ing-rice")]
        refs = add_ingredient_ref(refs, IngredientRef("rice", 1, "ing-rice"))
        self.assertEqual(len(refs), 1)
        self.assertEqual(refs[0].qty, 3)
        refs = add_ingredient_ref(refs, IngredientRef("beans", 1))
        refs = add_ingredient_ref(refs, IngredientRef("Bean", 2))
        self.assertEqual([(r.name, r.qty) for r in refs], [("Rice", 3), ("beans", 3)])

    def test_input_list_is_not_mutated(self):
        refs = [IngredientRef("Rice", 2)]
        add_ingredient_ref(refs, IngredientRef("rice", 1))
        self.assertEqual(refs[0].qty, 2)


class TestGridWrites(unittest.TestCase):

    def setUp(self):
        self.plan = WeekPlan(WEEK)
        self.address = SlotAddress("dinner", 2)

    def test_grid_shape(self):
        self.assertEqual(set(self.plan.grid), {"breakfast", "lunch", "dinner", "snack"})
        for row in self.plan.grid.values():
            self.assertEqual(len(row), 7)

    def test_set_slot_is_copy_on_write(self):
        updated = set_slot(self.plan, self.address, SlotEntry([IngredientRef("rice", 1)]))
        self.assertIsNone(get_slot(self.plan, self.address))
        self.assertEqual(get_slot(updated, self.address).ingredient_refs[0].name, "rice")

    def test_empty_cell_collapses_to_none(self):
        profile = SlotAddress("dinner", 2, "profile", "p-me")
        plan = set_slot(self.plan, profile, SlotEntry([IngredientRef("rice", 1)]))
        self.assertIsInstance(plan.get_cell("dinner", 2), CellEntry)
        plan = set_slot(plan, profile, None)
        self.assertIsNone(plan.get_cell("dinner", 2))

    def test_short_rows_are_padded(self):
        plan = WeekPlan.from_dict({"grid": {"dinner": [None, None]}}, WEEK)
        self.assertEqual(len(plan.grid["dinner"]), 7)


class TestWeekNavigation(unittest.TestCase):

    def test_ensure_plan_inserts_once(self):
        plans = {}
        first = ensure_plan(plans, WEEK)
        self.assertIs(ensure_plan(plans, WEEK), first)

    def test_shift_week_creates_target_plan(self):
        state = make_state()
        moved = shift_week(state, 1)
        self.assertEqual(moved.current_week_start_date, "2024-01-08")
        self.assertIn("2024-01-08", moved.week_plans)
        self.assertNotIn("2024-01-08", state.week_plans)
        back = shift_week(moved, -2)
        self.assertEqual(back.current_week_start_date, "2023-12-25")

    def test_set_week_normalizes_to_monday(self):
        state = make_state()
        moved = set_week(state, "2024-01-18")
        self.assertEqual(moved.current_week_start_date, "2024-01-15")
        self.assertIs(set_week(state, "not a date"), state)
        self.assertIs(set_week(state, WEEK), state)

    def test_state_without_plan_gets_one(self):
        state = PlannerState(current_week_start_date=WEEK)
        self.assertIsNotNone(shift_week(state, 0).current_plan())


if __name__ == '__main__':
    unittest.main()
