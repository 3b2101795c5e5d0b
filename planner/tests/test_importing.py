import unittest

from planner.domain.Ingredient import Ingredient
from planner.domain.Profile import Profile
from planner.logic.importing.demo import create_demo_state
from planner.logic.importing.legacy import classify_cell, normalize_cell
from planner.logic.importing.reconciler import merge_receipt_items
from planner.logic.importing.state_io import export_state, import_state, reset_demo_data, validate_payload
from planner.utilities.validators import ReceiptItemInput

from state_builders import make_state, WEEK


def payload(**overrides):
    data = {
        "ingredients": [{"id": "ing-1", "name": "chicken", "category": "Protein", "count": 2}],
        "meals": [{"id": "meal-1", "name": "Roast", "ingredients": [{"name": "chicken", "qty": 1}],
                   "servingsDefault": 2}],
        "profiles": [{"id": "p-1", "name": "Sam"}],
        "pinnedMealIds": ["meal-1", "meal-gone"],
        "weekPlans": {},
        "currentWeekStartDate": "2024-01-03",
    }
    data.update(overrides)
    return data


class TestReceiptMerge(unittest.TestCase):

    def test_plural_merges_into_existing(self):
        state = merge_receipt_items(make_state(), [{"name": "eggs", "count": 1}])
        eggs = [i for i in state.ingredients if i.key == "egg"]
        self.assertEqual(len(eggs), 1)
        self.assertEqual((eggs[0].name, eggs[0].count), ("Egg", 13))

    def test_ie_plural_merges_into_existing(self):
        state = make_state(ingredients=[Ingredient("Cookie", category="Pantry", count=2, id="ing-cookie")])
        state = merge_receipt_items(state, [{"name": "cookies", "count": 3}])
        self.assertEqual([(i.name, i.count) for i in state.ingredients], [("Cookie", 5)])

    def test_new_items_and_minimum_count(self):
        items = [ReceiptItemInput(name="Spinach", category="Produce", count=0),
                 {"name": "Oat Milk", "category": "Imaginary", "count": 3}]
        state = merge_receipt_items(make_state(), items)
        spinach = state.ledger.find_by_name("spinach")
        self.assertEqual((spinach.count, spinach.category, spinach.servings_per_count), (1, "Produce", 1))
        self.assertEqual(state.ledger.find_by_name("oat milk").category, "Other")

    def test_empty_drafts_are_a_no_op(self):
        state = make_state()
        self.assertIs(merge_receipt_items(state, []), state)
        self.assertIs(merge_receipt_items(state, [{"name": "  "}]), state)


class TestLegacyCells(unittest.TestCase):

    def test_classification(self):
        self.assertEqual(classify_cell(None), "empty")
        self.assertEqual(classify_cell(["rice"]), "flat_list")
        self.assertEqual(classify_cell({"family": None, "profiles": {}}), "canonical")
        self.assertEqual(classify_cell({"ingredientRefs": [], "servings": 2}), "single_slot")
        self.assertEqual(classify_cell({"p-1": {"ingredientRefs": []}}), "profile_map")
        self.assertEqual(classify_cell(42), "unknown")

    def test_flat_list_becomes_family_slot(self):
        cell = normalize_cell(["chicken", {"name": "rice", "qty": 2}, ""], {"p-1"})
        self.assertEqual([(r.name, r.qty) for r in cell.family.ingredient_refs], [("chicken", 1), ("rice", 2)])

    def test_single_slot_becomes_family_slot(self):
        cell = normalize_cell({"ingredients": ["bread"], "servings": 3, "assignedTo": "p-1"}, {"p-1"})
        self.assertEqual(cell.family.servings, 3)
        self.assertEqual(cell.family.ingredient_refs[0].name, "bread")

    def test_profile_map_drops_unknown_profiles(self):
        raw = {"p-1": {"ingredientRefs": [{"name": "rice", "qty": 1}]},
               "p-gone": {"ingredientRefs": [{"name": "bread", "qty": 1}]}}
        cell = normalize_cell(raw, {"p-1"})
        self.assertIsNone(cell.family)
        self.assertEqual(list(cell.profiles), ["p-1"])
        self.assertIsNone(normalize_cell({"p-gone": {"ingredientRefs": [{"name": "x"}]}}, {"p-1"}))

    def test_empty_content_collapses(self):
        self.assertIsNone(normalize_cell([], {"p-1"}))
        self.assertIsNone(normalize_cell({"family": {"ingredientRefs": []}, "profiles": {}}, {"p-1"}))
        self.assertIsNone(normalize_cell("rice", {"p-1"}))


class TestStateImportExport(unittest.TestCase):

    def test_invalid_payloads_are_rejected(self):
        state = make_state()
        for bad in (None, [], payload(weekPlans=None), payload(ingredients="x"),
                    payload(currentWeekStartDate="someday")):
            self.assertFalse(validate_payload(bad))
            self.assertIs(import_state(state, bad), state)
        missing = payload()
        del missing["meals"]
        self.assertIs(import_state(state, missing), state)

    def test_import_normalizes(self):
        data = payload(weekPlans={"2024-01-01": {"grid": {"dinner": [["chicken"], None]}}})
        state = import_state(make_state(), data)
        self.assertEqual(state.current_week_start_date, "2024-01-01")
        self.assertEqual(state.pinned_meal_ids, ["meal-1"])
        self.assertEqual(state.inventory_sort, "category")
        self.assertEqual(state.profiles[0].name, "Sam")
        cell = state.current_plan().get_cell("dinner", 0)
        self.assertEqual(cell.family.ingredient_refs[0].name, "chicken")
        self.assertEqual(len(state.current_plan().grid["dinner"]), 7)

    def test_missing_profiles_get_a_default(self):
        data = payload()
        del data["profiles"]
        state = import_state(make_state(), data)
        self.assertEqual(len(state.profiles), 1)

    def test_export_then_import_keeps_content(self):
        original = make_state()
        original.profiles.append(Profile(name="Kid", id="p-kid"))
        exported = export_state(original)
        self.assertNotIn("inventorySort", exported)
        restored = import_state(create_demo_state(), exported)
        self.assertEqual(restored.ledger.to_dict(), original.ledger.to_dict())
        self.assertEqual([m.to_dict() for m in restored.meals], [m.to_dict() for m in original.meals])
        self.assertEqual(restored.profile_ids(), {"p-me", "p-kid"})
        self.assertEqual(restored.current_week_start_date, WEEK)

    def test_reset_demo(self):
        state = reset_demo_data(make_state())
        self.assertEqual(len(state.ingredients), 12)
        self.assertEqual(len(state.meals), 3)
        self.assertEqual(state.pinned_meal_ids, [m.id for m in state.meals])
        self.assertIsNotNone(state.current_plan())


if __name__ == '__main__':
    unittest.main()
